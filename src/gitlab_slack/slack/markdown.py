"""Convert GitLab-flavored Markdown to Slack message formatting.

Only the constructs that commonly show up in issue and merge request
descriptions are handled: bullets, links, images, bold, italic and headings.
"""

import re

BULLET_PATTERN = re.compile(r"^([ \t]+)?\*(?!\*)", re.MULTILINE)
LINK_PATTERN = re.compile(r"(!)?\[([^\]]*)]\(([^)]+)\)")
BOLD_PATTERN = re.compile(r"(\*\*|__)(.+?)\1")
ITALIC_PATTERN = re.compile(r"([*_])(.+?)\1")
HEADER_PATTERN = re.compile(r"^#+\s*(.+)$", re.MULTILINE)

# Bold and italic use each other's characters, so they go through
# placeholders before being finalized.
BOLD_PLACEHOLDER = "\vb"
ITALIC_PLACEHOLDER = "\vi"


def convert_markdown_to_slack(description: str | None, project_url: str) -> str:
    """Convert a Markdown description to Slack formatting.

    Image links are relative to the project, so they are prefixed with
    `project_url`.
    """
    if not description:
        return ""

    def _bullet(match: re.Match) -> str:
        return ("\t" if match.group(1) else "") + "•"

    def _link(match: re.Match) -> str:
        image, name, url = match.groups()
        if image:
            return f"<{project_url}{url}|{name}>"
        return f"<{url}|{name}>"

    def _header(match: re.Match) -> str:
        heading = match.group(1)
        # Already bold; adding more would break it.
        if "*" in heading:
            return heading
        return f"*{heading}*"

    text = BULLET_PATTERN.sub(_bullet, description)
    text = LINK_PATTERN.sub(_link, text)
    text = BOLD_PATTERN.sub(lambda m: f"{BOLD_PLACEHOLDER}{m.group(2)}{BOLD_PLACEHOLDER}", text)
    text = ITALIC_PATTERN.sub(lambda m: f"{ITALIC_PLACEHOLDER}{m.group(2)}{ITALIC_PLACEHOLDER}", text)
    text = text.replace(BOLD_PLACEHOLDER, "*").replace(ITALIC_PLACEHOLDER, "_")
    return HEADER_PATTERN.sub(_header, text)
