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

"""A library for filter operators."""

from edc_lm.utility import errors
from edc_lm.utility import types
import tensorflow as tf

FlowFieldVal = types.FlowFieldVal


def _pad_zero_gradient(f: tf.Tensor) -> tf.Tensor:
  """Pads one ghost layer that mirrors the boundary values of `f`."""
  return tf.pad(f, paddings=[(1, 1)] * 3, mode='SYMMETRIC')


def laplace_filter_7(f: FlowFieldVal, s: float) -> FlowFieldVal:
  r"""Applies one pass of the 7-point Laplace filter to a 3D variable.

  \bar{f}_ijk = (1 - s)f_ijk + s/6(f_{i-1,j,k} + f_{i+1,j,k} +
      f_{i,j-1,k} + f_{i,j+1,k} + f_{i,j,k-1} + f_{i,j,k+1})
  For s = 0.5,
  \bar{f}_ijk = f_ijk + 1/12(\nabla^2_x f_ijk + \nabla^2_y f_ijk +
      \nabla^2_z f_ijk)

  The values outside of the domain are the mirror images of the boundary
  values, i.e. the gradient normal to the boundary is zero.

  Reference:
  Haltiner, George J., and Roger Terry Williams. Numerical prediction and
  dynamic meteorology. No. 551.5 HAL. 1980, p. 392-397.

  Args:
    f: The 3D variable to be filtered.
    s: The weight of the neighbors, in (0, 1].

  Returns:
    The filtered variable f.
  """
  g = _pad_zero_gradient(f)
  neighbors = (
      g[:-2, 1:-1, 1:-1] + g[2:, 1:-1, 1:-1] +
      g[1:-1, :-2, 1:-1] + g[1:-1, 2:, 1:-1] +
      g[1:-1, 1:-1, :-2] + g[1:-1, 1:-1, 2:]
  )
  return (1.0 - s) * f + s / 6.0 * neighbors


def check_filter_parameters(filter_coeff: float, num_iter: int) -> None:
  """Raises `InvalidConfigurationError` for invalid filter parameters."""
  if (isinstance(filter_coeff, bool) or
      not isinstance(filter_coeff, (int, float)) or
      not 0.0 < filter_coeff <= 1.0):
    raise errors.InvalidConfigurationError(
        'filterCoeff', filter_coeff, 'a number in (0, 1]')
  if isinstance(num_iter, bool) or not isinstance(num_iter, int) or (
      num_iter < 0):
    raise errors.InvalidConfigurationError(
        'filterIterations', num_iter, 'an integer >= 0')


class SpatialFilter:
  """A low-pass filter that produces the sub-grid companion of a field."""

  def __init__(self, filter_coeff: float = 0.5, num_iter: int = 1):
    """Initializes the filter.

    Args:
      filter_coeff: The weight `s` of the neighbors in each pass.
      num_iter: The number of passes of the filter.

    Raises:
      InvalidConfigurationError: If `filter_coeff` is not in (0, 1] or
        `num_iter` is not a non-negative integer.
    """
    check_filter_parameters(filter_coeff, num_iter)
    self.filter_coeff = float(filter_coeff)
    self.num_iter = num_iter

  def apply(self, f: FlowFieldVal) -> FlowFieldVal:
    """Filters `f` with `num_iter` passes of the Laplace filter.

    Args:
      f: The 3D field to be filtered.

    Returns:
      A new filtered field with the same shape as `f`.
    """
    g = tf.convert_to_tensor(f, dtype=types.TF_DTYPE)
    if g.shape.rank != 3:
      raise errors.InvalidInputError(
          f'The filter requires a 3D field, got shape {g.shape}.')
    for _ in range(self.num_iter):
      g = laplace_filter_7(g, self.filter_coeff)
    return tf.identity(g)
