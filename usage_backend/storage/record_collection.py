"""List of parsed records that also carries the stored entries that did not parse.

Files written by older clients can hold entries that do not fit the current
models (a numeric ``version``, a non-ISO ``timestamp``). Those entries are
kept as raw JSON values and written back verbatim, in their original
position. Iterating, indexing and ``len`` only see parsed records, so lookups
and aggregation ignore unparsed entries.
"""
from typing import Any, Callable, Iterable, List, Optional, Tuple, TypeVar

from usage_backend.schemas.base import BaseSchema

RecordT = TypeVar("RecordT", bound=BaseSchema)

# Anchor for unparsed entries stored after the last parsed record
END_OF_LOADED = None


class RecordCollection(List[RecordT]):
    """Parsed records in storage order, plus unparsed entries anchored between them.

    Each unparsed entry is anchored to the parsed record it preceded on load,
    or to ``END_OF_LOADED`` when no parsed record followed it. Anchors are
    compared by identity, so callers must mutate records in place rather than
    replacing them.
    """

    def __init__(self, records: Iterable[RecordT] = (), unparsed: Iterable[Tuple[Any, Optional[RecordT]]] = ()):
        super().__init__(records)
        self.unparsed: List[Tuple[Any, Optional[RecordT]]] = list(unparsed)
        # Holding the loaded records keeps their ids unique while the collection lives.
        self._loaded = list(self)
        self._loaded_ids = {id(record) for record in self._loaded}

    @classmethod
    def from_entries(cls, entries: Iterable[Any], parse: Callable[[Any], Optional[RecordT]]) -> "RecordCollection[RecordT]":
        """Build a collection from raw entries. ``parse`` returns None for entries it rejects."""
        records: List[RecordT] = []
        unparsed: List[Tuple[Any, Optional[RecordT]]] = []
        waiting: List[Any] = []
        for entry in entries:
            record = parse(entry)
            if record is None:
                waiting.append(entry)
                continue
            unparsed.extend((raw, record) for raw in waiting)
            waiting = []
            records.append(record)
        unparsed.extend((raw, END_OF_LOADED) for raw in waiting)
        return cls(records, unparsed)

    @property
    def stored_count(self) -> int:
        """Number of entries written on save, parsed or not."""
        return len(self) + len(self.unparsed)

    def is_loaded(self, record: RecordT) -> bool:
        return id(record) in self._loaded_ids

    def trim_oldest(self, limit: int) -> int:
        """Evict entries from the front, parsed or not, until at most ``limit`` remain.

        Returns the number of evicted entries.
        """
        evicted = 0
        while self.stored_count > limit:
            if self.unparsed and self._unparsed_is_oldest():
                self.unparsed.pop(0)
            else:
                del self[0]
            evicted += 1
        return evicted

    def _unparsed_is_oldest(self) -> bool:
        if not self:
            return True
        anchor = self.unparsed[0][1]
        if anchor is END_OF_LOADED:
            return not self.is_loaded(self[0])
        return anchor is self[0] or not any(record is anchor for record in self)

    def to_stored(self, dump: Callable[[RecordT], Any]) -> List[Any]:
        """Serialize parsed records with ``dump`` and splice unparsed entries back in."""
        present = {id(record) for record in self}
        before: dict[int, List[Any]] = {}
        trailing: List[Any] = []
        output: List[Any] = []
        for raw, anchor in self.unparsed:
            if anchor is END_OF_LOADED:
                trailing.append(raw)
            elif id(anchor) in present:
                before.setdefault(id(anchor), []).append(raw)
            else:
                # Anchor was evicted, so the entry belongs at the front.
                output.append(raw)

        for record in self:
            if trailing and not self.is_loaded(record):
                output.extend(trailing)
                trailing = []
            output.extend(before.get(id(record), ()))
            output.append(dump(record))
        output.extend(trailing)
        return output
