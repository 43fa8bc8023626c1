import logging
import posixpath
import re
from typing import Dict, List, NamedTuple, Optional

logger = logging.getLogger(__name__)

FENCE_PATTERN = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})\s*(?P<info>[^`]*?)\s*$")
IMAGE_PATTERN = re.compile(
    r"!\[(?P<alt>[^\]]*)\]\(\s*<?(?P<target>[^)\s>]+)>?"
    r"(?:\s+(?P<title>\"[^\"]*\"))?\s*\)"
)
LINK_PATTERN = re.compile(
    r"(?<!!)\[(?P<text>[^\]]*)\]\(\s*<?(?P<target>[^)\s>]+)>?(?:\s+\"[^\"]*\")?\s*\)"
)
INLINE_CODE_PATTERN = re.compile(r"`[^`\n]+`")
_INLINE_CODE_SPLIT = re.compile(r"(`[^`\n]+`)")
URL_SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")

DEFAULT_TYPOS: Dict[str, str] = {
    "aplication": "application",
    "varified": "verified",
    "recieve": "receive",
    "seperate": "separate",
    "occured": "occurred",
    "definately": "definitely",
    "accomodate": "accommodate",
    "existance": "existence",
    "untill": "until",
}


class CodeBlock(NamedTuple):
    language: Optional[str]
    line: int
    end_line: int
    content: str
    closed: bool


class Reference(NamedTuple):
    text: str
    target: str
    line: int


class Typo(NamedTuple):
    word: str
    suggestion: str
    line: int


def extract_code_blocks(body: str) -> List[CodeBlock]:
    """Return fenced code blocks with their info-string language and start line."""
    blocks = []
    lines = body.splitlines()
    open_fence = None

    for lineno, line in enumerate(lines, start=1):
        match = FENCE_PATTERN.match(line)
        if open_fence is None:
            if match:
                info = match.group("info").strip()
                language = info.split()[0] if info else None
                open_fence = (match.group("fence"), language, lineno, [])
            continue

        fence, language, start, content = open_fence
        # A closing fence uses the same character, is at least as long and has no info
        if (
            match
            and match.group("fence")[0] == fence[0]
            and len(match.group("fence")) >= len(fence)
            and not match.group("info")
        ):
            blocks.append(
                CodeBlock(language, start, lineno, "\n".join(content), True)
            )
            open_fence = None
        else:
            content.append(line)

    if open_fence is not None:
        _, language, start, content = open_fence
        blocks.append(
            CodeBlock(language, start, len(lines), "\n".join(content), False)
        )

    return blocks


def _prose_lines(body: str):
    """Yield (line number, text) for lines outside fenced code, inline code removed."""
    fenced = set()
    lines = body.splitlines()
    for block in extract_code_blocks(body):
        fenced.update(range(block.line, block.end_line + 1))

    for lineno, line in enumerate(lines, start=1):
        if lineno in fenced:
            continue
        yield lineno, INLINE_CODE_PATTERN.sub("", line)


def extract_images(body: str) -> List[Reference]:
    return [
        Reference(m.group("alt"), m.group("target"), lineno)
        for lineno, line in _prose_lines(body)
        for m in IMAGE_PATTERN.finditer(line)
    ]


def extract_links(body: str) -> List[Reference]:
    return [
        Reference(m.group("text"), m.group("target"), lineno)
        for lineno, line in _prose_lines(body)
        for m in LINK_PATTERN.finditer(line)
    ]


def is_relative_ref(target: str) -> bool:
    if not target or target.startswith(("#", "//")):
        return False
    return not URL_SCHEME_PATTERN.match(target)


def find_typos(body: str, typos: Dict[str, str] | None = None) -> List[Typo]:
    typos = DEFAULT_TYPOS if typos is None else typos
    if not typos:
        return []
    typos = {word.lower(): suggestion for word, suggestion in typos.items()}

    pattern = re.compile(
        r"\b(" + "|".join(re.escape(word) for word in typos) + r")\b", re.IGNORECASE
    )
    found = []
    for lineno, line in _prose_lines(body):
        for match in pattern.finditer(line):
            word = match.group(1)
            found.append(Typo(word, typos[word.lower()], lineno))
    return found


def process_image_references(content: str, base_url: str, post_dir: str = "") -> str:
    """
    Rewrite relative image references so they point at the image endpoint.
    Absolute URLs are left untouched; paths starting with / are rooted at base_url.
    Fenced code and inline code spans are copied as they are.
    """

    def _rewrite(match: re.Match) -> str:
        target = match.group("target")
        if not is_relative_ref(target):
            return match.group(0)
        if target.startswith("/"):
            path = target.lstrip("/")
        else:
            path = posixpath.normpath(posixpath.join(post_dir, target))
        logger.debug(f"Rewrote image reference {target} -> {base_url}/{path}")
        title = match.group("title")
        suffix = f" {title}" if title else ""
        return f"![{match.group('alt')}]({base_url}/{path}{suffix})"

    fenced = set()
    for block in extract_code_blocks(content):
        fenced.update(range(block.line, block.end_line + 1))

    lines = content.splitlines(keepends=True)
    for index, line in enumerate(lines):
        if index + 1 in fenced:
            continue
        # Odd positions of the split are inline code spans
        parts = _INLINE_CODE_SPLIT.split(line)
        parts[::2] = [IMAGE_PATTERN.sub(_rewrite, part) for part in parts[::2]]
        lines[index] = "".join(parts)
    return "".join(lines)


def get_content_type_from_filename(filename: str) -> str:
    """
    Determine content type from file extension
    """
    filename = filename.lower()
    if filename.endswith((".jpg", ".jpeg")):
        return "image/jpeg"
    elif filename.endswith(".png"):
        return "image/png"
    elif filename.endswith(".gif"):
        return "image/gif"
    elif filename.endswith(".svg"):
        return "image/svg+xml"
    elif filename.endswith(".webp"):
        return "image/webp"
    else:
        return "application/octet-stream"
