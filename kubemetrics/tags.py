"""Tag templating and metric name conversion"""

import re

WILDCARD = "*"

_UPPER = re.compile(r"[A-Z]")


def underscore(name: str) -> str:
    """workingSetBytes -> working_set_bytes"""
    return _UPPER.sub(lambda m: "_" + m.group(0).lower(), name)


class TagTemplate:
    """Configured event tag with at most one ``*`` marker.

    The template is split around the marker once, at construction;
    ``generate`` then only concatenates. Without a marker every call
    returns the template itself.
    """

    def __init__(self, template: str) -> None:
        self.template = template
        self.prefix: str | None = None
        self.suffix = ""
        if WILDCARD in template:
            # Only the first marker splits; a second one stays in the suffix.
            self.prefix, self.suffix = template.split(WILDCARD, 1)

    def generate(self, name: str) -> str:
        if self.prefix is None:
            return self.template
        return f"{self.prefix}{name}{self.suffix}"

    def __repr__(self) -> str:
        return f"TagTemplate({self.template!r})"
