#
# Copyright 2022 European Centre for Medium-Range Weather Forecasts (ECMWF)
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# In applying this licence, ECMWF does not waive the privileges and immunities
# granted to it by virtue of its status as an intergovernmental organisation nor
# does it submit to any jurisdiction.
#

import logging
from typing import Generic, Iterator, List

from .set import E, Set


class TrackableSet(Generic[E]):
    """
    A set that keeps track of the elements added and removed since the last flush.

    Intended for syncing a set to a database: check has_changes(), persist
    to_be_added() and to_be_removed(), then call flush() to start a new
    tracking window. Initial values are not considered changes.

    Adding and then removing the same element within one window leaves it
    in both to_be_added() and to_be_removed(); the two are not reconciled.
    """

    __slots__ = ("_set", "_to_be_added", "_to_be_removed")

    def __init__(self, *values: E):
        self._set = Set(*values)
        self._to_be_added = Set()
        self._to_be_removed = Set()

    def add(self, v: E) -> "TrackableSet[E]":
        """Add an element to the set and mark it as to-be-added"""
        self._set.add(v)
        self._to_be_added.add(v)
        return self

    def remove(self, v: E) -> "TrackableSet[E]":
        """Remove an element from the set and mark it as to-be-removed"""
        if not self._set.contains(v):
            return self
        self._set.remove(v)
        self._to_be_removed.add(v)
        return self

    def contains(self, v: E) -> bool:
        return self._set.contains(v)

    def items(self) -> List[E]:
        return self._set.items()

    def count(self) -> int:
        return self._set.count()

    def intersection(self, other: "TrackableSet[E]") -> "TrackableSet[E]":
        """Return a new trackable set of the common elements, with no tracked changes"""
        return TrackableSet(*self._set.intersection(other._set))

    def diff(self, other: "TrackableSet[E]") -> "TrackableSet[E]":
        """Return a new trackable set of the elements not in other, with no tracked changes"""
        return TrackableSet(*self._set.diff(other._set))

    def intersects(self, other: "TrackableSet[E]") -> bool:
        return self._set.intersects(other._set)

    def clone(self) -> "TrackableSet[E]":
        """Copy the set together with its pending changes"""
        result = TrackableSet()
        result._set = self._set.clone()
        result._to_be_added = self._to_be_added.clone()
        result._to_be_removed = self._to_be_removed.clone()
        logging.debug(
            "Cloned trackable set with {} elements".format(result.count()),
            extra={"added": result._to_be_added.count(), "removed": result._to_be_removed.count()},
        )
        return result

    def to_be_added(self) -> Set[E]:
        """The live set of additions; mutating it changes what is tracked"""
        return self._to_be_added

    def to_be_removed(self) -> Set[E]:
        """The live set of removals; mutating it changes what is tracked"""
        return self._to_be_removed

    def has_changes(self) -> bool:
        return self._to_be_added.count() > 0 or self._to_be_removed.count() > 0

    def flush(self) -> None:
        """Forget the tracked changes, the elements themselves are kept"""
        logging.debug(
            "Flushing tracked changes",
            extra={"added": self._to_be_added.count(), "removed": self._to_be_removed.count()},
        )
        self._to_be_added.flush()
        self._to_be_removed.flush()

    def __contains__(self, v) -> bool:
        return self.contains(v)

    def __iter__(self) -> Iterator[E]:
        return iter(self._set)

    def __len__(self) -> int:
        return self.count()

    def __eq__(self, other):
        if isinstance(other, TrackableSet):
            return (
                self._set == other._set
                and self._to_be_added == other._to_be_added
                and self._to_be_removed == other._to_be_removed
            )
        return False

    __hash__ = None

    def __repr__(self):
        return "{}({}, to_be_added={}, to_be_removed={})".format(
            self.__class__.__name__, self._set, self._to_be_added, self._to_be_removed
        )
