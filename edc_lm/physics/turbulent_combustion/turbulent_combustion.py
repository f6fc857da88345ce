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

"""Defines a factory method for the turbulent combustion model."""

from typing import Optional

from edc_lm.physics.thermodynamics import reaction_thermo
from edc_lm.physics.turbulent_combustion import edc
from edc_lm.physics.turbulent_combustion import turbulent_combustion_generic
from edc_lm.utility import types

# The model names under which the host solver selects the EDC closure.
_EDC_NAMES = ('EDC', 'StoR')


def turbulent_combustion_model_factory(
    model_name: Optional[str],
    thermo: reaction_thermo.ReactionThermo,
    config: types.ConfigMap,
) -> Optional[turbulent_combustion_generic.TurbulentCombustionGeneric]:
  """Creates an instance of the selected turbulent combustion model."""
  if model_name is None:
    return None

  if model_name in _EDC_NAMES:
    return edc.EddyDissipationConcept(thermo, config)
  else:
    raise NotImplementedError(
        f'{model_name} is not supported. Available options for turbulent'
        f' combustion are: {", ".join(_EDC_NAMES)}.'
    )
