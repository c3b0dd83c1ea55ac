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

from typing import Generic, Hashable, Iterator, List, TypeVar

E = TypeVar("E", bound=Hashable)


class Set(Generic[E]):
    """An unordered collection of unique elements.

    Backed by a dict whose keys are the elements; the values carry no
    information. Mutating methods work in place and return the set itself,
    so calls can be chained and every holder of the set sees the change.
    """

    __slots__ = ("_items",)

    def __init__(self, *values: E):
        self._items = dict.fromkeys(values)

    def add(self, v: E) -> "Set[E]":
        """Add an element to the set"""
        self._items[v] = None
        return self

    def remove(self, v: E) -> "Set[E]":
        """Remove an element from the set, if present"""
        self._items.pop(v, None)
        return self

    def contains(self, v: E) -> bool:
        return v in self._items

    def items(self) -> List[E]:
        """Return a new list of the elements, in no particular order"""
        return list(self._items)

    def intersection(self, other: "Set[E]") -> "Set[E]":
        """Return a new set with the elements found in both sets"""
        result = Set()
        for v in self._items:
            if other.contains(v):
                result.add(v)
        return result

    def diff(self, other: "Set[E]") -> "Set[E]":
        """Return a new set with the elements of this set not found in other"""
        result = Set()
        for v in self._items:
            if not other.contains(v):
                result.add(v)
        return result

    def intersects(self, other: "Set[E]") -> bool:
        """True if the sets share at least one element"""
        for v in self._items:
            if other.contains(v):
                return True
        return False

    def clone(self) -> "Set[E]":
        return Set(*self._items)

    def count(self) -> int:
        return len(self._items)

    def flush(self) -> None:
        """Remove every element, keeping the same underlying storage"""
        self._items.clear()

    def __contains__(self, v) -> bool:
        return self.contains(v)

    def __iter__(self) -> Iterator[E]:
        return iter(self._items)

    def __len__(self) -> int:
        return self.count()

    def __eq__(self, other):
        if isinstance(other, Set):
            return self._items.keys() == other._items.keys()
        return False

    __hash__ = None

    def __repr__(self):
        if not self._items:
            return f"{self.__class__.__name__}()"
        return f"{self.__class__.__name__}({{{', '.join(repr(v) for v in self._items)}}})"
