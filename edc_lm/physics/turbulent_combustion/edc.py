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

"""A library for the Eddy Dissipation Concept turbulent-combustion closure.

The reaction is assumed to take place in the fine structures of the
turbulence, whose mass fraction γ_L and residence time τ* follow from the
energy cascade (see `fine_structure`). The sub-grid fluctuation of the
temperature within a cell is described by a presumed PDF. Its spread follows a
scale-similarity model based on the filtered temperature T̃, restricted to the
fluid surrounding the fine structures, which are homogeneously mixed:
  σ = C_dev (1 - γ_L) |T - T̃|,
and the reaction rate of species k is the PDF-weighted average of the
chemistry evaluated at the zone temperatures Tᵢ = T + σ ψ̄ᵢ:
  ω̄_k = κ Σᵢ Pᵢ ω_k(Tᵢ).
The reacting fraction κ is bounded to [0, 1]. The consumption of each species
cannot exceed what the fine structures exchange with their surroundings within
τ*, i.e. |ω̄_k| ≤ κ ϱ Y_k / τ*. This bound is enforced with a common factor for
all species so that the stoichiometry of the chemistry is preserved.
"""

from typing import NamedTuple, Optional, Tuple

from absl import logging
from edc_lm.numerics import filters
from edc_lm.numerics import presumed_pdf
from edc_lm.physics.thermodynamics import reaction_thermo
from edc_lm.physics.turbulent_combustion import edc_parameters
from edc_lm.physics.turbulent_combustion import fine_structure
from edc_lm.physics.turbulent_combustion import turbulent_combustion_generic
from edc_lm.utility import errors
from edc_lm.utility import types
import tensorflow as tf

FlowFieldVal = types.FlowFieldVal
FlowFieldMap = types.FlowFieldMap
LinearizedRate = turbulent_combustion_generic.LinearizedRate

# Consumption is linearized implicitly only where the mass fraction exceeds
# this value.
_Y_MIN = 1e-12

_REQUIRED_STATES = ('T', 'rho')
_REQUIRED_ADDITIONAL_STATES = ('epsilon', 'tke')


class _Snapshot(NamedTuple):
  """The results of one `correct` call."""
  # The reaction sources, ordered by species index.
  rates: Tuple[LinearizedRate, ...]
  qdot: FlowFieldVal
  t_sgs: FlowFieldVal
  spread: FlowFieldVal
  mixing: fine_structure.MixingState


class _Model(NamedTuple):
  """The objects derived from one set of parameters."""
  params: edc_parameters.EdcParameters
  mixing_model: fine_structure.FineStructureMixingModel
  spatial_filter: filters.SpatialFilter
  zones: presumed_pdf.ZoneStatistics


class EddyDissipationConcept(
    turbulent_combustion_generic.TurbulentCombustionGeneric):
  """The Eddy Dissipation Concept with a presumed temperature PDF."""

  def __init__(
      self,
      thermo: reaction_thermo.ReactionThermo,
      config: types.ConfigMap,
  ):
    """Initializes the EDC model.

    Args:
      thermo: The provider of the reaction rates and species enthalpies.
      config: The coefficient dictionary of the model. It is kept by reference
        and parsed again by `read`.

    Raises:
      InvalidConfigurationError: If `config` holds an invalid entry.
    """
    super().__init__(thermo)
    self._config = config
    self._pdf = presumed_pdf.PresumedPDF()
    self._num_nonfinite = 0
    self._snapshot: Optional[_Snapshot] = None
    self._model = self._build(edc_parameters.parse_edc_parameters(config))

  def _build(self, params: edc_parameters.EdcParameters) -> _Model:
    """Derives the mixing model, the filter and the zones from `params`."""
    spec = presumed_pdf.DistributionSpec(
        params.pdf_name,
        left=params.left_truncation,
        right=params.right_truncation,
    )
    model = _Model(
        params=params,
        mixing_model=fine_structure.FineStructureMixingModel(
            params.version, params.c1, params.c2),
        spatial_filter=filters.SpatialFilter(
            params.filter_coeff, params.filter_iterations),
        zones=self._pdf.zone_statistics(spec, params.span_zone),
    )
    logging.info('EDC model: %r with %d PDF zones.', params,
                 model.zones.num_zones)
    return model

  @property
  def params(self) -> edc_parameters.EdcParameters:
    return self._model.params

  @property
  def zone_statistics(self) -> presumed_pdf.ZoneStatistics:
    """The probabilities and normalized temperatures of the PDF zones."""
    return self._model.zones

  @property
  def num_degenerate(self) -> int:
    """The number of recovered numerical degeneracies so far."""
    return self._pdf.num_degenerate + self._num_nonfinite

  def read(self) -> bool:
    """Parses the coefficient dictionary again.

    Returns:
      Whether any parameter changed.

    Raises:
      InvalidConfigurationError: If the dictionary holds an invalid entry. The
        previously active parameters are kept in that case.
    """
    params = edc_parameters.parse_edc_parameters(self._config)
    if params == self._model.params:
      return False
    self._model = self._build(params)
    return True

  def _check_inputs(self, states: FlowFieldMap,
                    additional_states: FlowFieldMap) -> None:
    missing = [k for k in _REQUIRED_STATES if k not in states] + [
        k for k in _REQUIRED_ADDITIONAL_STATES if k not in additional_states
    ]
    if missing:
      raise errors.InvalidInputError(
          f'Required fields {missing} are missing for the EDC model.')

  def _remove_nonfinite(self, species: str, rate: tf.Tensor) -> tf.Tensor:
    """Replaces non-finite rates with 0."""
    finite = tf.math.is_finite(rate)
    num_bad = int(tf.math.count_nonzero(tf.logical_not(finite)))
    if num_bad > 0:
      self._num_nonfinite += num_bad
      logging.warning(
          '%s: %d non-finite reaction rate(s) of %s replaced by 0.',
          errors.NumericDegenerateWarning.__name__, num_bad, species)
      rate = tf.where(finite, rate, tf.zeros_like(rate))
    return rate

  def correct(
      self,
      states: FlowFieldMap,
      additional_states: FlowFieldMap,
  ) -> None:
    """Computes the reaction sources and the heat release.

    Args:
      states: The flow field variables. Requires the temperature `T`, the
        density `rho`, and the mass fraction `Y_X` of every species `X`.
      additional_states: The turbulence fields. Requires the dissipation rate
        `epsilon` and the turbulent kinetic energy `tke`. The kinematic
        viscosity `nu` is optional and defaults to the configured value.

    Raises:
      InvalidInputError: If a required field is missing. The results of the
        previous call are kept in that case.
    """
    model = self._model
    params = model.params
    self._check_inputs(states, additional_states)
    temperature = tf.convert_to_tensor(states['T'], dtype=types.TF_DTYPE)
    rho = tf.convert_to_tensor(states['rho'], dtype=types.TF_DTYPE)
    y = self.thermo.mass_fractions(states)
    nu = additional_states.get('nu', params.nu)

    t_c = None
    if model.mixing_model.uses_local_constants:
      t_c = self.thermo.chemical_time_scale(temperature, states)
    mixing = model.mixing_model.compute_mixing(
        additional_states['epsilon'], additional_states['tke'], nu, t_c)

    t_sgs = model.spatial_filter.apply(temperature)
    sigma = (params.deviation_similar_coeff * (1.0 - mixing.gamma_l) *
             tf.math.abs(temperature - t_sgs))

    species = self.thermo.species_names
    mean_rates = {sp: tf.zeros_like(temperature) for sp in species}
    for p_i, psi_i in zip(model.zones.probabilities, model.zones.values):
      if p_i <= 0.0:
        continue
      t_zone = temperature + sigma * float(psi_i)
      zone_rates = self.thermo.reaction_rates(t_zone, states)
      for sp in species:
        mean_rates[sp] = mean_rates[sp] + float(p_i) * zone_rates[sp]

    kappa = tf.clip_by_value(mixing.kappa, 0.0, 1.0)
    has_fine_structures = tf.greater(mixing.tau, 0.0)
    tau = tf.where(has_fine_structures, mixing.tau, tf.ones_like(mixing.tau))

    # The largest fraction of the chemical rates that the fine structures can
    # sustain, common to all species.
    scale = tf.ones_like(temperature)
    for sp in species:
      mean_rates[sp] = self._remove_nonfinite(sp, mean_rates[sp])
      consuming = tf.logical_and(
          tf.less(mean_rates[sp], 0.0), has_fine_structures)
      supply = rho * tf.maximum(y[sp], 0.0) / tau
      demand = tf.where(consuming, -mean_rates[sp], tf.ones_like(supply))
      scale = tf.where(consuming, tf.minimum(scale, supply / demand), scale)
    scale = tf.clip_by_value(scale, 0.0, 1.0)

    rates = []
    qdot = tf.zeros_like(temperature)
    for sp in species:
      rate = kappa * scale * mean_rates[sp]
      qdot = qdot - self.thermo.enthalpy_of_formation(sp) * rate
      implicit = tf.logical_and(tf.less(rate, 0.0), tf.greater(y[sp], _Y_MIN))
      y_safe = tf.where(implicit, y[sp], tf.ones_like(y[sp]))
      rates.append(
          LinearizedRate(
              coeff=tf.where(implicit, rate / y_safe, tf.zeros_like(rate)),
              source=tf.where(implicit, tf.zeros_like(rate), rate),
          ))

    # Publishes all results at once.
    self._snapshot = _Snapshot(
        rates=tuple(rates),
        qdot=qdot,
        t_sgs=t_sgs,
        spread=sigma,
        mixing=mixing,
    )

  def _current(self) -> _Snapshot:
    snapshot = self._snapshot
    if snapshot is None:
      raise RuntimeError(
          '`correct` has to be called before the EDC results are accessed.')
    return snapshot

  def r(self, species: str) -> LinearizedRate:
    """Returns the linearized reaction source of `species`.

    Raises:
      UnknownSpeciesError: If `species` is not part of the mechanism.
    """
    index = self.thermo.species_index(species)
    return self._current().rates[index]

  def qdot(self) -> FlowFieldVal:
    """Returns the heat release rate, in units of W/m³."""
    return self._current().qdot

  @property
  def t_sgs(self) -> FlowFieldVal:
    """The filtered temperature of the last `correct` call."""
    return self._current().t_sgs

  @property
  def spread(self) -> FlowFieldVal:
    """The sub-grid temperature spread σ of the last `correct` call."""
    return self._current().spread

  @property
  def mixing_state(self) -> fine_structure.MixingState:
    """The fine-structure state of the last `correct` call."""
    return self._current().mixing
