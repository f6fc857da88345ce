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

"""Parameters of the Eddy Dissipation Concept closure.

The parameters are read from the coefficient dictionary of the host solver,
which is handed over as a mapping, e.g.:
  {
      'version': 'v2016',
      'PDF_Name': 'normal',
      'spanZoneForPDF': 0.5,
      'truncationForPDF': 3.0,
      'deviationSimilarCoeff': 1.0,
      'filterCoeff': 0.5,
      'filterIterations': 1,
  }
Entries that are not listed in `_ENTRIES` are ignored.
"""

import dataclasses
from typing import Any

from absl import logging
import numpy as np
from edc_lm.numerics import filters
from edc_lm.numerics import presumed_pdf
from edc_lm.physics import constants
from edc_lm.physics.turbulent_combustion import fine_structure
from edc_lm.utility import errors
from edc_lm.utility import types

ModelVersion = fine_structure.ModelVersion

# The documentation of the closure names `v2015` as the default version, which
# is not one of the supported versions. v2005 is used instead.
DEFAULT_VERSION = ModelVersion.V2005


@dataclasses.dataclass(frozen=True)
class EdcParameters:
  """Validated parameters of the EDC closure."""
  # The version of the fine-structure model.
  version: ModelVersion = DEFAULT_VERSION
  # The name of the presumed distribution of the sub-grid temperature.
  pdf_name: str = 'normal'
  # The width of a zone in the normalized temperature.
  span_zone: float = 0.5
  # The normalized temperature is truncated to [-truncation, truncation].
  truncation: float = 3.0
  # The coefficient of the scale-similarity model for the temperature spread.
  deviation_similar_coeff: float = 1.0
  # The weight of the neighbors in the Laplace filter.
  filter_coeff: float = 0.5
  # The number of passes of the Laplace filter.
  filter_iterations: int = 1
  # The constants of the local coefficients of the v2016 model.
  c1: float = fine_structure.C1_DEFAULT
  c2: float = fine_structure.C2_DEFAULT
  # The kinematic viscosity used when the host does not provide a `nu` field.
  nu: float = constants.NU_AIR

  @property
  def left_truncation(self) -> float:
    return -self.truncation

  @property
  def right_truncation(self) -> float:
    return self.truncation


# Maps the dictionary entries to the fields of `EdcParameters`.
_ENTRIES = {
    'version': 'version',
    'PDF_Name': 'pdf_name',
    'spanZoneForPDF': 'span_zone',
    'truncationForPDF': 'truncation',
    'deviationSimilarCoeff': 'deviation_similar_coeff',
    'filterCoeff': 'filter_coeff',
    'filterIterations': 'filter_iterations',
    'C1': 'c1',
    'C2': 'c2',
    'nu': 'nu',
}

_POSITIVE_ENTRIES = (
    'spanZoneForPDF',
    'truncationForPDF',
    'deviationSimilarCoeff',
    'C1',
    'C2',
    'nu',
)


def _positive_float(entry: str, value: Any) -> float:
  """Converts `value` to a positive finite float."""
  try:
    number = float(value)
  except (TypeError, ValueError):
    raise errors.InvalidConfigurationError(
        entry, value, 'a positive number') from None
  if not np.isfinite(number) or number <= 0.0:
    raise errors.InvalidConfigurationError(entry, value, 'a positive number')
  return number


def parse_edc_parameters(config: types.ConfigMap) -> EdcParameters:
  """Builds validated `EdcParameters` from the host dictionary entries.

  Args:
    config: The coefficient dictionary of the closure.

  Returns:
    The validated parameters. Entries missing from `config` take their
    default values.

  Raises:
    InvalidConfigurationError: If an entry has a value outside of its allowed
      set. The message names the entry, the value, and the allowed values.
  """
  kwargs = {}

  if 'version' in config:
    kwargs['version'] = ModelVersion.from_name(config['version'])
  else:
    logging.warning(
        'No `version` is specified for the EDC model. The documented default'
        ' `v2015` is not a supported version; `%s` is used instead.',
        DEFAULT_VERSION.value)

  if 'PDF_Name' in config:
    name = config['PDF_Name']
    if name not in presumed_pdf.SUPPORTED_DISTRIBUTIONS:
      raise errors.InvalidConfigurationError.from_choices(
          'PDF_Name', name, presumed_pdf.SUPPORTED_DISTRIBUTIONS)
    kwargs['pdf_name'] = name

  for entry in _POSITIVE_ENTRIES:
    if entry in config:
      kwargs[_ENTRIES[entry]] = _positive_float(entry, config[entry])

  filter_coeff = config.get('filterCoeff', EdcParameters.filter_coeff)
  num_iter = config.get('filterIterations', EdcParameters.filter_iterations)
  filters.check_filter_parameters(filter_coeff, num_iter)
  kwargs['filter_coeff'] = float(filter_coeff)
  kwargs['filter_iterations'] = num_iter

  return EdcParameters(**kwargs)
