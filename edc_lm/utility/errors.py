# Copyright 2025 The edc_lm Authors.
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

"""Error kinds reported by the combustion closure.

All errors except `UnknownSpeciesError` derive from `ValueError`, so callers
that already guard configuration and input validation with `ValueError` keep
working. Numerical degeneracies are never raised: they are recovered where they
occur, logged and counted, and `NumericDegenerateWarning` only names the
category.
"""

from typing import Iterable


def _allowed(allowed: Iterable[str]) -> str:
  return ', '.join(f'"{a}"' for a in allowed)


class InvalidInputError(ValueError):
  """A non-positive spread, or a missing/ill-formed input field."""


class UnsupportedDistributionError(ValueError):
  """The presumed distribution name is not recognized."""

  def __init__(self, name: str, allowed: Iterable[str]):
    super().__init__(
        f'Distribution "{name}" is not supported. Available options are:'
        f' {_allowed(allowed)}.'
    )
    self.name = name


class InvalidTruncationBoundsError(ValueError):
  """Truncation bounds are not ordered, or the zone width is not positive."""


class InvalidConfigurationError(ValueError):
  """A configuration entry has a value outside of its allowed set."""

  def __init__(self, entry: str, value, allowed: str):
    super().__init__(
        f'Invalid value {value!r} for `{entry}`. Allowed: {allowed}.'
    )
    self.entry = entry
    self.value = value

  @classmethod
  def from_choices(
      cls, entry: str, value, choices: Iterable[str]
  ) -> 'InvalidConfigurationError':
    return cls(entry, value, _allowed(choices))


class UnknownSpeciesError(KeyError):
  """A reaction rate is requested for a species that is not tracked."""

  def __init__(self, name: str, allowed: Iterable[str]):
    super().__init__(
        f'Species "{name}" is not part of the mechanism. Available species'
        f' are: {_allowed(allowed)}.'
    )
    self.name = name


class NumericDegenerateWarning(RuntimeWarning):
  """A distribution evaluation produced a non-finite or zero-mass result."""
