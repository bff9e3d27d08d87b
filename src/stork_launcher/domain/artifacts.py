"""Artifact value objects produced by the dispatch planner.

Purpose
-------
Describe *what* a generation run writes without performing any I/O. The planner
returns :class:`Artifact` instances; the composition root materialises them
through the template renderer and resource copier.

Contents
--------
* :class:`FragmentKind` – template or verbatim resource.
* :class:`Fragment` – one piece of an artifact body.
* :class:`Artifact` – relative output path, ordered fragments, executable flag.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath


class FragmentKind(Enum):
    TEMPLATE = "template"
    RESOURCE = "resource"


@dataclass(frozen=True, slots=True)
class Fragment:
    kind: FragmentKind
    name: str

    @classmethod
    def template(cls, name: str) -> Fragment:
        return cls(FragmentKind.TEMPLATE, name)

    @classmethod
    def resource(cls, name: str) -> Fragment:
        return cls(FragmentKind.RESOURCE, name)


@dataclass(frozen=True, slots=True)
class Artifact:
    """A single output file decided by the dispatch planner.

    Attributes
    ----------
    path:
        Location relative to the output directory.
    fragments:
        Ordered body pieces; rendered templates and verbatim resources are
        concatenated in this order.
    executable:
        Whether the written file receives execute permission bits.
    kind:
        Short label used in log events (``launcher``, ``helper``, ``init.d``...).

    Examples
    --------
    >>> art = Artifact(PurePosixPath("bin/demo.exe"), (Fragment.resource("x.exe"),), kind="helper")
    >>> art.is_verbatim_copy
    True
    """

    path: PurePosixPath
    fragments: tuple[Fragment, ...]
    executable: bool = False
    kind: str = "launcher"

    @property
    def is_verbatim_copy(self) -> bool:
        """Return ``True`` when the artifact is a single resource copied as-is."""

        return len(self.fragments) == 1 and self.fragments[0].kind is FragmentKind.RESOURCE

    def describe(self) -> dict[str, object]:
        return {
            "path": self.path.as_posix(),
            "kind": self.kind,
            "executable": self.executable,
            "fragments": [f"{fragment.kind.value}:{fragment.name}" for fragment in self.fragments],
        }
