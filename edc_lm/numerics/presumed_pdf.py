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

"""A library for presumed probability density functions of a scalar.

The sub-grid fluctuation of a scalar φ (the temperature in the combustion
closure) is described by a presumed distribution of the normalized variable
  ψ = (φ - φ̄) / σ,
where φ̄ is the local mean and σ the local spread. All distributions provided
here have zero mean and unit variance in ψ:
  'normal': the standard Gaussian;
  'uniform': constant density over [-√3, √3];
  'laplace': the double exponential with scale 1/√2.

The distribution is truncated to [ψₗ, ψᵣ] and renormalized so that it
integrates to 1 over that interval. The truncated interval is then split into
zones of width Δψ, and for each zone the probability
  Pᵢ = F(ψᵢ₊₁) - F(ψᵢ)
and the conditional mean
  ψ̄ᵢ = ∫_{ψᵢ}^{ψᵢ₊₁} ψ f(ψ) dψ / Pᵢ
are computed. The closure replaces the integral of a function over the PDF by
the sum Σᵢ Pᵢ g(φ̄ + σ ψ̄ᵢ).

The conditional means use the partial first moment
  M(ψ) = ∫_{-∞}^{ψ} t f(t) dt,
which has a closed form for every family:
  normal:  M(ψ) = -f(ψ);
  uniform: M(ψ) = (ψ² - 3) / (4√3) for |ψ| ≤ √3;
  laplace: M(ψ) = ½ e^{-|ψ|/b} (ψ - b) for ψ < 0, -½ e^{-|ψ|/b} (ψ + b)
    otherwise.
"""

import dataclasses
from typing import Callable, NamedTuple, Optional, Union

from absl import logging
import numpy as np
from scipy import stats
from edc_lm.utility import errors

ArrayLike = Union[float, np.ndarray]

# The half width of the support of the unit-variance uniform distribution.
_UNIFORM_HALF_WIDTH = np.sqrt(3.0)
# The scale of the unit-variance Laplace distribution.
_LAPLACE_SCALE = 1.0 / np.sqrt(2.0)
# Probability masses that are not normal floating-point numbers are treated as
# zero.
_MIN_MASS = np.finfo(np.float64).tiny
# Relative tolerance used to decide whether the zone width divides the
# truncated interval exactly.
_ZONE_COUNT_RTOL = 1e-9


def _normal_partial_moment(x: np.ndarray) -> np.ndarray:
  return -stats.norm.pdf(x)


def _uniform_partial_moment(x: np.ndarray) -> np.ndarray:
  a = _UNIFORM_HALF_WIDTH
  x_c = np.clip(x, -a, a)
  return (x_c**2 - a**2) / (4.0 * a)


def _laplace_partial_moment(x: np.ndarray) -> np.ndarray:
  b = _LAPLACE_SCALE
  decay = 0.5 * np.exp(-np.abs(x) / b)
  return np.where(x < 0.0, decay * (x - b), -decay * (x + b))


class _Family(NamedTuple):
  """A presumed distribution and the partial first moment of its density."""
  dist: stats.rv_continuous
  partial_moment: Callable[[np.ndarray], np.ndarray]


_FAMILIES = {
    'normal': _Family(stats.norm(), _normal_partial_moment),
    'uniform': _Family(
        stats.uniform(loc=-_UNIFORM_HALF_WIDTH, scale=2.0 * _UNIFORM_HALF_WIDTH),
        _uniform_partial_moment,
    ),
    'laplace': _Family(
        stats.laplace(scale=_LAPLACE_SCALE), _laplace_partial_moment
    ),
}

SUPPORTED_DISTRIBUTIONS = tuple(_FAMILIES.keys())


def check_distribution_name(name: str) -> None:
  """Raises `UnsupportedDistributionError` if `name` is not a known family."""
  if name not in _FAMILIES:
    raise errors.UnsupportedDistributionError(name, SUPPORTED_DISTRIBUTIONS)


def check_truncation(left: float, right: float) -> None:
  """Raises `InvalidTruncationBoundsError` unless `left` < `right`."""
  if not (np.isfinite(left) and np.isfinite(right)) or left >= right:
    raise errors.InvalidTruncationBoundsError(
        'Truncation bounds must be finite and satisfy left < right, but got'
        f' left = {left}, right = {right}.'
    )


def zone_edges(span_zone: float, left: float, right: float) -> np.ndarray:
  """Splits [`left`, `right`] into zones of width `span_zone`.

  Args:
    span_zone: The width of a zone in the normalized variable.
    left: The left truncation bound.
    right: The right truncation bound.

  Returns:
    The `n + 1` edges of the `n` zones. If `span_zone` does not divide the
    interval exactly, the last zone is clipped at `right`.

  Raises:
    InvalidTruncationBoundsError: If `span_zone` is not positive or the bounds
      are not ordered.
  """
  check_truncation(left, right)
  if not np.isfinite(span_zone) or span_zone <= 0.0:
    raise errors.InvalidTruncationBoundsError(
        f'The zone width has to be positive, but got {span_zone}.'
    )
  num_zones = max(
      int(np.ceil((right - left) / span_zone - _ZONE_COUNT_RTOL)), 1
  )
  edges = np.minimum(left + span_zone * np.arange(num_zones + 1), right)
  edges[-1] = right
  return edges


@dataclasses.dataclass(frozen=True)
class DistributionSpec:
  """The presumed distribution of a scalar.

  Attributes:
    name: The name of the distribution family.
    mean: The mean of the scalar.
    sigma: The spread of the scalar, which maps one unit of the normalized
      variable to physical units.
    left: The left truncation bound of the normalized variable.
    right: The right truncation bound of the normalized variable.
  """
  name: str
  mean: float = 0.0
  sigma: float = 1.0
  left: float = -3.0
  right: float = 3.0

  def __post_init__(self):
    check_distribution_name(self.name)
    if not self.sigma > 0.0:
      raise errors.InvalidInputError(
          f'The spread of a distribution has to be positive, got {self.sigma}.'
      )
    check_truncation(self.left, self.right)


class ZoneStatistics(NamedTuple):
  """Per-zone probabilities and normalized conditional means."""
  probabilities: np.ndarray
  values: np.ndarray

  @property
  def num_zones(self) -> int:
    return len(self.probabilities)


class PresumedPDF:
  """Evaluates a truncated presumed PDF and its zone statistics.

  All methods are pure functions of their arguments. The only state is
  `num_degenerate`, the number of degenerate evaluations that were recovered
  with a fallback value.
  """

  def __init__(self):
    self.num_degenerate = 0

  def _degenerate(self, msg: str, *args) -> None:
    """Records a recovered numerical degeneracy."""
    self.num_degenerate += 1
    logging.warning('%s: ' + msg, errors.NumericDegenerateWarning.__name__,
                    *args)

  def _family(self, name: str) -> _Family:
    check_distribution_name(name)
    return _FAMILIES[name]

  def _mass(self, family: _Family, a: ArrayLike, b: ArrayLike) -> np.ndarray:
    """Computes the probability of [`a`, `b`] without truncation."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    # The survival function keeps the precision in the right tail.
    return np.where(
        a > 0.0,
        family.dist.sf(a) - family.dist.sf(b),
        family.dist.cdf(b) - family.dist.cdf(a),
    )

  def _truncated_mass(self, family: _Family, left: float,
                      right: float) -> Optional[float]:
    """Returns the mass in [`left`, `right`], or None if it vanishes."""
    if left is None or right is None:
      raise errors.InvalidTruncationBoundsError(
          'Both truncation bounds are required for a truncated distribution,'
          f' got left = {left}, right = {right}.'
      )
    check_truncation(left, right)
    mass = float(self._mass(family, left, right))
    if not np.isfinite(mass) or mass <= _MIN_MASS:
      self._degenerate(
          'the distribution has no mass in [%g, %g]; falling back to the'
          ' uniform distribution on the truncated interval.', left, right)
      return None
    return mass

  def normalize(self, phi: ArrayLike, phi_average: ArrayLike,
                sigma: ArrayLike) -> ArrayLike:
    """Computes the normalized variable (phi - phi_average) / sigma.

    Args:
      phi: The value of the scalar.
      phi_average: The mean of the scalar.
      sigma: The spread of the scalar.

    Returns:
      The normalized scalar.

    Raises:
      InvalidInputError: If any `sigma` is not positive.
    """
    if not np.all(np.asarray(sigma) > 0.0):
      raise errors.InvalidInputError(
          f'`sigma` has to be positive for normalization, got {sigma}.'
      )
    return (np.asarray(phi) - phi_average) / sigma

  def denormalize(self, norm_phi: ArrayLike, phi_average: ArrayLike,
                  sigma: ArrayLike) -> ArrayLike:
    """Maps a normalized value back to the scalar."""
    return phi_average + sigma * np.asarray(norm_phi)

  def density(
      self,
      norm_phi: ArrayLike,
      name: str,
      left: Optional[float] = None,
      right: Optional[float] = None,
  ) -> ArrayLike:
    """Computes the probability density at `norm_phi`.

    Args:
      norm_phi: The normalized scalar.
      name: The name of the distribution family.
      left: The optional left truncation bound. Must be given with `right`.
      right: The optional right truncation bound. Must be given with `left`.

    Returns:
      The density of the distribution, renormalized to integrate to 1 over
      [`left`, `right`] if the bounds are provided.
    """
    family = self._family(name)
    x = np.asarray(norm_phi, dtype=np.float64)
    if left is None and right is None:
      return self._finite(family.dist.pdf(x), 0.0)

    mass = self._truncated_mass(family, left, right)
    inside = (x >= left) & (x <= right)
    if mass is None:
      return np.where(inside, 1.0 / (right - left), 0.0)
    return self._finite(np.where(inside, family.dist.pdf(x) / mass, 0.0), 0.0)

  def cumulative(
      self,
      norm_phi: ArrayLike,
      name: str,
      left: Optional[float] = None,
      right: Optional[float] = None,
  ) -> ArrayLike:
    """Computes the cumulative probability up to `norm_phi`.

    With truncation the result is 0 at `left` and 1 at `right` exactly.
    """
    family = self._family(name)
    x = np.asarray(norm_phi, dtype=np.float64)
    if left is None and right is None:
      return np.clip(self._finite(family.dist.cdf(x), 0.0), 0.0, 1.0)

    mass = self._truncated_mass(family, left, right)
    x_c = np.clip(x, left, right)
    if mass is None:
      return (x_c - left) / (right - left)
    return np.clip(
        self._finite(self._mass(family, left, x_c) / mass, 0.0), 0.0, 1.0
    )

  def expectation(
      self,
      norm_phi: ArrayLike,
      name: str,
      left: Optional[float] = None,
      right: Optional[float] = None,
  ) -> ArrayLike:
    """Computes the conditional mean of the variable below `norm_phi`.

    Without truncation this is E[ψ | ψ ≤ `norm_phi`], which tends to
    `norm_phi` where the distribution has no mass below it; `norm_phi` is
    returned in that case. With truncation the condition is
    `left` ≤ ψ ≤ `norm_phi`.
    """
    if left is not None or right is not None:
      return self.zone_expectation(left, norm_phi, name, left, right)

    family = self._family(name)
    x = np.asarray(norm_phi, dtype=np.float64)
    cdf = family.dist.cdf(x)
    value = np.divide(
        family.partial_moment(x),
        cdf,
        out=np.array(x, dtype=np.float64),
        where=cdf > _MIN_MASS,
    )
    return self._finite(value, x)

  def zone_expectation(
      self,
      left_phi: ArrayLike,
      right_phi: ArrayLike,
      name: str,
      left: Optional[float] = None,
      right: Optional[float] = None,
  ) -> ArrayLike:
    """Computes the conditional mean of the variable in a zone.

    Args:
      left_phi: The left end of the zone.
      right_phi: The right end of the zone.
      name: The name of the distribution family.
      left: The optional left truncation bound. Must be given with `right`.
      right: The optional right truncation bound. Must be given with `left`.

    Returns:
      E[ψ | `left_phi` ≤ ψ ≤ `right_phi`], with the zone clipped to the
      truncated interval if bounds are provided. A zone without probability
      returns its midpoint.
    """
    family = self._family(name)
    a = np.asarray(left_phi, dtype=np.float64)
    b = np.asarray(right_phi, dtype=np.float64)
    if left is not None or right is not None:
      if self._truncated_mass(family, left, right) is None:
        a = np.clip(a, left, right)
        b = np.clip(b, left, right)
        return 0.5 * (a + np.maximum(a, b))
      a = np.clip(a, left, right)
      b = np.clip(b, left, right)
    b = np.maximum(a, b)

    midpoint = 0.5 * (a + b)
    mass = self._mass(family, a, b)
    value = np.divide(
        family.partial_moment(b) - family.partial_moment(a),
        mass,
        out=np.array(midpoint, dtype=np.float64),
        where=mass > _MIN_MASS,
    )
    return np.clip(self._finite(value, midpoint), a, b)

  def compute_zone_probabilities(self, span_zone: float, left: float,
                                 right: float, name: str) -> np.ndarray:
    """Computes the probability of each zone in [`left`, `right`].

    Args:
      span_zone: The width of each zone.
      left: The left truncation bound.
      right: The right truncation bound.
      name: The name of the distribution family.

    Returns:
      One non-negative probability per zone. The probabilities sum to 1 up to
      round-off.
    """
    self._family(name)
    edges = zone_edges(span_zone, left, right)
    cdf = self.cumulative(edges, name, left, right)
    return np.maximum(np.diff(cdf), 0.0)

  def compute_zone_values(self, span_zone: float, left: float, right: float,
                          name: str) -> np.ndarray:
    """Computes the normalized conditional mean of each zone."""
    self._family(name)
    edges = zone_edges(span_zone, left, right)
    return self.zone_expectation(edges[:-1], edges[1:], name, left, right)

  def zone_statistics(self, spec: DistributionSpec,
                      span_zone: float) -> ZoneStatistics:
    """Computes the zone probabilities and values for `spec`."""
    return ZoneStatistics(
        probabilities=self.compute_zone_probabilities(
            span_zone, spec.left, spec.right, spec.name),
        values=self.compute_zone_values(
            span_zone, spec.left, spec.right, spec.name),
    )

  def _finite(self, value: np.ndarray, fallback: ArrayLike) -> np.ndarray:
    """Replaces non-finite entries in `value` with `fallback`."""
    value = np.asarray(value, dtype=np.float64)
    finite = np.isfinite(value)
    if not np.all(finite):
      self._degenerate('%d non-finite distribution value(s) replaced.',
                       int(np.size(finite) - np.count_nonzero(finite)))
      value = np.where(finite, value, fallback)
    return value
