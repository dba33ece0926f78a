import textwrap

import yaml  # type: ignore[import-untyped]


def unindent(text: str) -> str:
    """Strip the common indentation and the leading newline of an inline YAML block."""
    return textwrap.dedent(text).lstrip("\n")


def compose(text: str) -> yaml.Node:
    """Compose YAML text into its node tree."""
    return yaml.compose(unindent(text), Loader=yaml.SafeLoader)
