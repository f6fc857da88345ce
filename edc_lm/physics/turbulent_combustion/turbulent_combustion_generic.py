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

"""Defines an abstract class for the turbulent-combustion models."""

import abc
from typing import NamedTuple

from edc_lm.physics.thermodynamics import reaction_thermo
from edc_lm.utility import types

FlowFieldVal = types.FlowFieldVal
FlowFieldMap = types.FlowFieldMap


class LinearizedRate(NamedTuple):
  """The reaction source of a species, linearized in its mass fraction Y.

  The source is `coeff * Y + source`. `coeff` is to be treated implicitly by
  the host equation assembly and `source` explicitly.
  """
  coeff: FlowFieldVal
  source: FlowFieldVal


class TurbulentCombustionGeneric(abc.ABC):
  """Defines an abstract class for the turbulent-combustion models."""

  def __init__(self, thermo: reaction_thermo.ReactionThermo):
    """Initializes the turbulent combustion model."""
    self.thermo = thermo

  @abc.abstractmethod
  def correct(
      self,
      states: FlowFieldMap,
      additional_states: FlowFieldMap,
  ) -> None:
    """Updates the reaction rates with the current flow field."""

  @abc.abstractmethod
  def r(self, species: str) -> LinearizedRate:
    """Returns the reaction source of `species`, in units of kg/m³/s."""

  @abc.abstractmethod
  def qdot(self) -> FlowFieldVal:
    """Returns the heat release rate, in units of W/m³."""

  def read(self) -> bool:
    """Updates the model coefficients; returns whether anything changed."""
    return False
