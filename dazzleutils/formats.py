"""Multi-format data codec keyed on file extension.

Parses and serializes YAML, JSON, TOML and Markdown documents with a
frontmatter block. The format is chosen from the file extension (case
sensitive, leading dot stripped). Decode errors from the underlying codecs
propagate untouched.
"""

import json
import os
import re
import tomllib
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

import tomli_w
import yaml

from .errors import UnsupportedFormatError

YAML_EXTENSIONS = ('yaml', 'yml')
JSON_EXTENSIONS = ('json',)
TOML_EXTENSIONS = ('toml',)
MARKDOWN_EXTENSIONS = ('md', 'mdx', 'markdown')

# The end delimiter must be followed by EOF or by a new line (possibly preceded with spaces)
_AFTER_END_DELIMITER_RE = re.compile(r'\s*(?:\n|\Z)')


class JsonSchemaLoader(yaml.SafeLoader):
    """SafeLoader restricted to the JSON-compatible YAML schema.

    Only null, true/false, integers and floats are resolved implicitly.
    Timestamps, ``yes``/``no`` booleans and other YAML 1.1 extras load
    as plain strings.
    """


class NoAliasDumper(yaml.SafeDumper):
    """SafeDumper that never emits anchors/aliases for repeated objects.

    Besides its YAML 1.1 resolvers it knows the JSON schema ones, so any
    string JsonSchemaLoader would read back as a non-string is quoted.
    """

    def ignore_aliases(self, data: Any) -> bool:
        return True


JSON_SCHEMA_RESOLVERS = [
    ('tag:yaml.org,2002:null',
     re.compile(r'^(?:~|null|Null|NULL|)$'),
     ['~', 'n', 'N', '']),
    ('tag:yaml.org,2002:bool',
     re.compile(r'^(?:true|True|TRUE|false|False|FALSE)$'),
     list('tTfF')),
    ('tag:yaml.org,2002:int',
     re.compile(r'''^(?:[-+]?0b[0-1_]+
                 |[-+]?0o[0-7_]+
                 |[-+]?(?:0|[1-9][0-9_]*)
                 |[-+]?0x[0-9a-fA-F_]+)$''', re.X),
     list('-+0123456789')),
    ('tag:yaml.org,2002:float',
     re.compile(r'''^(?:[-+]?(?:[0-9][0-9_]*)(?:\.[0-9_]*)?(?:[eE][-+]?[0-9]+)?
                 |[-+]?\.[0-9_]+(?:[eE][-+]?[0-9]+)?
                 |[-+]?\.(?:inf|Inf|INF)
                 |\.(?:nan|NaN|NAN))$''', re.X),
     list('-+0123456789.')),
]

JsonSchemaLoader.yaml_implicit_resolvers = {}
for tag, regexp, first in JSON_SCHEMA_RESOLVERS:
    JsonSchemaLoader.add_implicit_resolver(tag, regexp, first)
    NoAliasDumper.add_implicit_resolver(tag, regexp, first)


def load_yaml(text: str) -> Any:
    return yaml.load(text, Loader=JsonSchemaLoader)


def dump_yaml(data: Any) -> str:
    if data is None:
        return ''
    return yaml.dump(
        data,
        Dumper=NoAliasDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def dump_json(data: Any) -> str:
    return json.dumps(data, indent=4, ensure_ascii=False)


@dataclass
class FrontMatterDocument:
    """A text document split into its frontmatter block and body.

    Attributes:
        frontmatter: Decoded frontmatter data, or None when there is none
        markdown: Everything after the frontmatter block
    """

    frontmatter: Optional[Any]
    markdown: str

    def to_dict(self) -> Dict[str, Any]:
        return {'frontmatter': self.frontmatter, 'markdown': self.markdown}


@dataclass(frozen=True)
class FrontMatterStyle:
    """Delimiter grammar of one frontmatter flavour."""

    name: str
    start_delimiter: str
    end_delimiter: str
    parse: Callable[[str], Any]
    # JSON blocks are delimited by their own braces, which belong to the data
    delimiters_in_data: bool = False

    def decode(self, inner: str) -> Any:
        if self.delimiters_in_data:
            inner = self.start_delimiter + inner + self.end_delimiter
        return self.parse(inner)


FRONT_MATTER_STYLES: List[FrontMatterStyle] = [
    FrontMatterStyle('yaml', '---\n', '\n---', load_yaml),
    FrontMatterStyle('toml', '+++\n', '\n+++', tomllib.loads),
    FrontMatterStyle('json', '{\n', '\n}', json.loads, delimiters_in_data=True),
]


def get_extension(file_path: Union[str, os.PathLike]) -> str:
    """Return the extension of ``file_path`` without the leading dot."""
    return os.path.splitext(os.fspath(file_path))[1][1:]


def parse_markdown_with_front_matter(text: str) -> FrontMatterDocument:
    """Split a document into frontmatter data and body.

    Tries YAML (``---``), TOML (``+++``) and JSON (``{``/``}``) blocks in
    that order against the start of the text. The first occurrence of the
    end delimiter closes the block, and it must be followed by optional
    whitespace and then a newline or the end of the text. For example::

        ---
        title: Title
        ---

        Markdown Content

    yields ``frontmatter={'title': 'Title'}`` and
    ``markdown='Markdown Content\\n'`` (blank lines right after the end
    delimiter are consumed).

    Only the first ``\\r\\n`` in the text is normalized to ``\\n``.

    Args:
        text: Full document text

    Returns:
        FrontMatterDocument; ``frontmatter`` is None and ``markdown`` is the
        whole text when no block is recognized
    """
    # TODO: normalize every CRLF once callers no longer depend on the
    # first-occurrence behaviour; later CRLFs currently survive into the block.
    text = text.replace('\r\n', '\n', 1)

    for style in FRONT_MATTER_STYLES:
        if not text.startswith(style.start_delimiter):
            continue
        index = text.find(style.end_delimiter)
        if index == -1:
            continue

        after_end_delimiter = text[index + len(style.end_delimiter):]
        match = _AFTER_END_DELIMITER_RE.match(after_end_delimiter)
        if match is None:
            continue

        frontmatter = style.decode(text[len(style.start_delimiter):index])
        return FrontMatterDocument(
            frontmatter=frontmatter,
            markdown=after_end_delimiter[match.end():],
        )

    return FrontMatterDocument(frontmatter=None, markdown=text)


def parse_data_by_file_path(content: str, file_path: Union[str, os.PathLike]) -> Any:
    """Decode ``content`` using the format implied by ``file_path``.

    Args:
        content: Raw file content
        file_path: Path whose extension selects the format

    Returns:
        Decoded data; a FrontMatterDocument for markdown files

    Raises:
        UnsupportedFormatError: If the extension is not recognized
    """
    extension = get_extension(file_path)
    if extension in YAML_EXTENSIONS:
        return load_yaml(content)
    if extension in JSON_EXTENSIONS:
        return json.loads(content)
    if extension in TOML_EXTENSIONS:
        return tomllib.loads(content)
    if extension in MARKDOWN_EXTENSIONS:
        return parse_markdown_with_front_matter(content)
    raise UnsupportedFormatError(extension, os.fspath(file_path), 'parse_data_by_file_path')


def stringify_data_by_file_path(data: Any, file_path: Union[str, os.PathLike]) -> str:
    """Encode ``data`` using the format implied by ``file_path``.

    Markdown data may be a FrontMatterDocument or a mapping with
    ``frontmatter`` and ``markdown`` keys; it is written as a YAML
    frontmatter block followed by the body.

    Raises:
        UnsupportedFormatError: If the extension is not recognized
    """
    extension = get_extension(file_path)
    if extension in YAML_EXTENSIONS:
        return dump_yaml(data)
    if extension in JSON_EXTENSIONS:
        return dump_json(data)
    if extension in TOML_EXTENSIONS:
        return tomli_w.dumps(data)
    if extension in MARKDOWN_EXTENSIONS:
        if isinstance(data, FrontMatterDocument):
            frontmatter, markdown = data.frontmatter, data.markdown
        else:
            frontmatter, markdown = data.get('frontmatter'), data.get('markdown', '')
        return '---\n' + dump_yaml(frontmatter) + '---\n' + markdown
    raise UnsupportedFormatError(extension, os.fspath(file_path), 'stringify_data_by_file_path')
