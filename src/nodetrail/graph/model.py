"""Node correspondences between two syntax trees."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional


@dataclass(slots=True, frozen=True)
class Mapping:
    """Pairs a node of the older (src) tree with a node of the newer (dst) tree."""

    src: int
    dst: int


@dataclass(slots=True)
class MappingStore:
    """One-to-one set of mappings with lookup from either side."""

    src_to_dst: Dict[int, int] = field(default_factory=dict)
    dst_to_src: Dict[int, int] = field(default_factory=dict)

    def add(self, src: int, dst: int) -> None:
        if src in self.src_to_dst or dst in self.dst_to_src:
            raise ValueError(f"node already mapped: {src} -> {dst}")
        self.src_to_dst[src] = dst
        self.dst_to_src[dst] = src

    def has_src(self, src: int) -> bool:
        return src in self.src_to_dst

    def has_dst(self, dst: int) -> bool:
        return dst in self.dst_to_src

    def dst_for(self, src: int) -> Optional[int]:
        return self.src_to_dst.get(src)

    def src_for(self, dst: int) -> Optional[int]:
        return self.dst_to_src.get(dst)

    def __contains__(self, mapping: object) -> bool:
        if not isinstance(mapping, Mapping):
            return False
        return self.src_to_dst.get(mapping.src) == mapping.dst

    def __iter__(self) -> Iterator[Mapping]:
        for src, dst in sorted(self.src_to_dst.items()):
            yield Mapping(src, dst)

    def __len__(self) -> int:
        return len(self.src_to_dst)
