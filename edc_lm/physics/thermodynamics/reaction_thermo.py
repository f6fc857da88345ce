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

"""An abstract class for reaction-thermodynamics providers.

A provider couples a reaction mechanism with the thermodynamic data of its
species. The combustion closure only relies on this interface, so any
mechanism that supplies species names, enthalpies of formation, and mass
production rates as a function of temperature can be used with it.
"""

import abc
from typing import Dict, Sequence

from edc_lm.utility import errors
from edc_lm.utility import types
import tensorflow as tf

FlowFieldVal = types.FlowFieldVal
FlowFieldMap = types.FlowFieldMap


def mass_fraction_key(species: str) -> str:
  """Returns the name of the mass fraction field of `species`."""
  return f'Y_{species}'


class ReactionThermo(abc.ABC):
  """A generic class for reaction-thermodynamics providers."""

  @property
  @abc.abstractmethod
  def species_names(self) -> Sequence[str]:
    """The names of the transported species, in a stable order."""

  @property
  def num_species(self) -> int:
    return len(self.species_names)

  def species_index(self, species: str) -> int:
    """Returns the index of `species`.

    Raises:
      UnknownSpeciesError: If `species` is not part of the mechanism.
    """
    try:
      return list(self.species_names).index(species)
    except ValueError:
      raise errors.UnknownSpeciesError(species, self.species_names) from None

  def mass_fractions(self, states: FlowFieldMap) -> Dict[str, FlowFieldVal]:
    """Collects the mass fraction fields of all species from `states`.

    Args:
      states: The flow field variables keyed by name. The mass fraction of
        species `X` is keyed by `Y_X`.

    Returns:
      The mass fractions keyed by species name.

    Raises:
      InvalidInputError: If a mass fraction field is missing.
    """
    missing = [
        mass_fraction_key(sp)
        for sp in self.species_names
        if mass_fraction_key(sp) not in states
    ]
    if missing:
      raise errors.InvalidInputError(
          f'Mass fractions {missing} are required but not provided.')
    return {
        sp: tf.convert_to_tensor(
            states[mass_fraction_key(sp)], dtype=types.TF_DTYPE)
        for sp in self.species_names
    }

  @abc.abstractmethod
  def enthalpy_of_formation(self, species: str) -> float:
    """Returns the enthalpy of formation of `species`, in units of J/kg."""

  @abc.abstractmethod
  def reaction_rates(
      self,
      temperature: FlowFieldVal,
      states: FlowFieldMap,
  ) -> Dict[str, FlowFieldVal]:
    """Computes the mass production rate of each species.

    Args:
      temperature: The temperature at which the rates are evaluated, in units
        of K.
      states: The flow field variables, including the density `rho` and the
        mass fractions.

    Returns:
      The mass production rates keyed by species name, in units of kg/m³/s.
    """

  @abc.abstractmethod
  def chemical_time_scale(
      self,
      temperature: FlowFieldVal,
      states: FlowFieldMap,
  ) -> FlowFieldVal:
    """Computes the characteristic time scale of the chemistry, in s."""
