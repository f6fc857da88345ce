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

# coding=utf-8
"""A reaction-thermodynamics provider with a one-step mechanism.

The one-step chemistry model for gaseous phase reaction is represented as:
  F + 𝛎_O O -> P,
where:
  F is the fuel,
  O is the oxidizer, and
  P is the reaction product.
The reaction rate is a function of the mass fractions of the fuel and
oxidizer, as well as the temperature, which takes the form of the Arrhenius law:
  ω(F, O, T) = A[F]ᵃ[O]ᵇexp(-Eₐ/R/T),
where:
  A is a scaling constant,
  [F] = ϱ Y_F / W_F is the volume concentration of the fuel,
  [O] = ϱ Y_O / W_O is the volume concentration of the oxidizer,
  Eₐ is the activation energy,
  R is the universal gas constant, and
  T is the temperature.
The mass production rates of F, O, and P are then computed as:
  ω_F = -𝛎_F W_F ω(F, O, T),
  ω_O = -𝛎_O W_O ω(F, O, T),
  ω_P = (𝛎_F W_F + 𝛎_O W_O) ω(F, O, T),
so that mass is conserved. The heat of combustion Q is attributed to the
enthalpy of formation of the fuel, h_F = Q / (𝛎_F W_F), which gives the heat
release -Σ h_k ω_k = Q ω.
"""

from typing import Dict, Sequence

from edc_lm.physics import constants
from edc_lm.physics.thermodynamics import reaction_thermo
from edc_lm.utility import errors
from edc_lm.utility import types
import tensorflow as tf

FlowFieldVal = types.FlowFieldVal
FlowFieldMap = types.FlowFieldMap

# The lower bound of temperature considered in the onestep chemistry model, in
# units of K.
T_MIN = 273.0
# The upper bound of temperature considered in the onestep chemistry model, in
# units of K.
T_MAX = 2500.0
# The bounds of the chemical time scale, in units of s.
TC_MIN = 1e-10
TC_MAX = 1.0


def _arrhenius_law(
    c_f: tf.Tensor,
    c_o: tf.Tensor,
    temperature: tf.Tensor,
    a_cst: float,
    coeff_f: float,
    coeff_o: float,
    e_a: float,
) -> tf.Tensor:
  """Computes the Arrhenius law."""
  return a_cst * tf.math.pow(c_f, coeff_f) * tf.math.pow(
      c_o, coeff_o) * tf.math.exp(-e_a / constants.R_UNIVERSAL / temperature)


def _concentration(
    y_species: tf.Tensor,
    w_species: float,
    rho: tf.Tensor,
) -> tf.Tensor:
  """Computes the volume concentration of species."""
  return rho * y_species / w_species


def _bound_scalar(value: tf.Tensor, minval: float, maxval: float) -> tf.Tensor:
  """Enforces bounds for `value` so that `minval` <= `value` <= `maxval`."""
  return tf.minimum(
      tf.maximum(value, minval * tf.ones_like(value)),
      maxval * tf.ones_like(value))


class OneStepChemistry(reaction_thermo.ReactionThermo):
  """A one-step global mechanism F + O -> P."""

  def __init__(
      self,
      a_cst: float,
      coeff_f: float,
      coeff_o: float,
      e_a: float,
      q: float,
      w_f: float,
      w_o: float,
      nu_f: float = 1.0,
      nu_o: float = 1.0,
      species: Sequence[str] = ('F', 'O', 'P'),
  ):
    """Initializes the one-step mechanism.

    Args:
      a_cst: The constant A in the Arrhenius law.
      coeff_f: The power law coefficient of the fuel volume concentration.
      coeff_o: The power law coefficient of the oxidizer volume concentration.
      e_a: The activation energy, in units of J/mol.
      q: The heat of combustion, in units of J/mol.
      w_f: The molecular weight of the fuel, in units of kg/mol.
      w_o: The molecular weight of the oxidizer, in units of kg/mol.
      nu_f: The stoichiometric coefficient of the fuel.
      nu_o: The stoichiometric coefficient of the oxidizer.
      species: The names of the fuel, the oxidizer, and the product.

    Raises:
      ValueError: If `species` does not name exactly three distinct species.
    """
    if len(species) != 3 or len(set(species)) != 3:
      raise ValueError(
          'The one-step mechanism requires three distinct species names for'
          f' the fuel, oxidizer and product, got {species}.')
    self._species = tuple(species)
    self.a_cst = a_cst
    self.coeff_f = coeff_f
    self.coeff_o = coeff_o
    self.e_a = e_a
    self.q = q
    self.w_f = w_f
    self.w_o = w_o
    self.nu_f = nu_f
    self.nu_o = nu_o

  @property
  def species_names(self) -> Sequence[str]:
    return self._species

  def enthalpy_of_formation(self, species: str) -> float:
    """Returns the enthalpy of formation of `species`, in units of J/kg."""
    index = self.species_index(species)
    if index == 0:
      return self.q / (self.nu_f * self.w_f)
    return 0.0

  def omega(self, temperature: FlowFieldVal,
            states: FlowFieldMap) -> FlowFieldVal:
    """Computes the molar rate of the reaction, in units of mol/m³/s."""
    fuel, oxidizer, _ = self._species
    y = self.mass_fractions(states)
    rho = tf.convert_to_tensor(states['rho'], dtype=types.TF_DTYPE)
    c_f = _concentration(_bound_scalar(y[fuel], 0.0, 1.0), self.w_f, rho)
    c_o = _concentration(_bound_scalar(y[oxidizer], 0.0, 1.0), self.w_o, rho)
    return _arrhenius_law(
        c_f,
        c_o,
        _bound_scalar(
            tf.convert_to_tensor(temperature, dtype=types.TF_DTYPE), T_MIN,
            T_MAX),
        self.a_cst,
        self.coeff_f,
        self.coeff_o,
        self.e_a,
    )

  def reaction_rates(
      self,
      temperature: FlowFieldVal,
      states: FlowFieldMap,
  ) -> Dict[str, FlowFieldVal]:
    """Computes the mass production rates of F, O, and P in kg/m³/s."""
    if 'rho' not in states:
      raise errors.InvalidInputError(
          'The density `rho` is required by the one-step mechanism.')
    omega = self.omega(temperature, states)
    fuel, oxidizer, product = self._species
    return {
        fuel: -self.nu_f * self.w_f * omega,
        oxidizer: -self.nu_o * self.w_o * omega,
        product: (self.nu_f * self.w_f + self.nu_o * self.w_o) * omega,
    }

  def chemical_time_scale(
      self,
      temperature: FlowFieldVal,
      states: FlowFieldMap,
  ) -> FlowFieldVal:
    """Computes the fuel consumption time scale ϱ Y_F / |ω_F|."""
    fuel = self._species[0]
    rr_f = self.reaction_rates(temperature, states)[fuel]
    rho = tf.convert_to_tensor(states['rho'], dtype=types.TF_DTYPE)
    y_f = _bound_scalar(self.mass_fractions(states)[fuel], 0.0, 1.0)
    return _bound_scalar(
        rho * y_f / (tf.math.abs(rr_f) + constants.SMALL), TC_MIN, TC_MAX)
