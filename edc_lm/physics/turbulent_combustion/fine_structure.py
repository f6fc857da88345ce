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

"""A library for the fine-structure model of the Eddy Dissipation Concept.

The energy cascade model of the Eddy Dissipation Concept (EDC) estimates the
mass fraction of the fine structures γ_L and their mean residence time τ* from
the turbulent dissipation rate ε, the turbulent kinetic energy k, and the
kinematic viscosity ν:
  γ_L = C_γ (ν ε / k²)^¼,
  τ* = C_τ (ν / ε)^½.
The fraction of the fine structures that reacts is
  κ = γ_L^{n₁} / (1 - γ_L^{n₂}),
where the exponents depend on the model version:
  v1981: n₁ = 3, n₂ = 3 [1];
  v1996: n₁ = 2, n₂ = 3 [2];
  v2005: n₁ = 2, n₂ = 2, C_γ = 2.1377, C_τ = 0.4083 [3];
  v2016: exponents of v2005, with C_γ and C_τ computed locally from the
    turbulent Damköhler number Da and the turbulent Reynolds number Reₜ [4]:
      C_τ = min(C₁ / (Da √(Reₜ + 1)), 2.1377),
      C_γ = min(max(C₂ √(Da (Reₜ + 1)), 0.4082), 5),
    with Da = min(max(√(ν / ε) / t_c, 10⁻¹⁰), 10), Reₜ = k² / (ν ε), and t_c
    the chemical time scale.

References:
[1] Magnussen, B. (1981). On the structure of turbulence and a generalized
    eddy dissipation concept for chemical reaction in turbulent flow. In 19th
    Aerospace Sciences Meeting (p. 42).
[2] Gran, I. R., & Magnussen, B. F. (1996). A numerical study of a bluff-body
    stabilized diffusion flame. Part 2. Influence of combustion modeling and
    finite-rate chemistry. Combustion Science and Technology, 119(1-6),
    191-217.
[3] Magnussen, B. F. (2005). The Eddy Dissipation Concept - A Bridge Between
    Science and Technology. In ECCOMAS thematic conference on computational
    combustion (pp. 21-24).
[4] Parente, A., Malik, M. R., Contino, F., Cuoci, A., & Dally, B. B. (2016).
    Extension of the Eddy Dissipation Concept for turbulence/chemistry
    interactions to MILD combustion. Fuel, 163, 98-111.
"""

import enum
from typing import NamedTuple, Optional, Union

from edc_lm.physics import constants
from edc_lm.utility import errors
from edc_lm.utility import types
import tensorflow as tf

FlowFieldVal = types.FlowFieldVal

# Model constants of the energy cascade.
C_GAMMA = 2.1377
C_TAU = 0.4083
# Default constants for the local coefficients of the v2016 model.
C1_DEFAULT = 0.05774
C2_DEFAULT = 0.5
# Bounds of the local coefficients and the Damköhler number of the v2016 model.
_C_GAMMA_MIN = 0.4082
_C_GAMMA_MAX = 5.0
_DA_MIN = 1e-10
_DA_MAX = 10.0
# γ_L is clamped to [0, 1 - GAMMA_L_EPS] so that κ stays finite. The value is
# chosen to be resolvable in single precision.
GAMMA_L_EPS = 1e-4


class ModelVersion(enum.Enum):
  """Versions of the Eddy Dissipation Concept."""
  V1981 = 'v1981'
  V1996 = 'v1996'
  V2005 = 'v2005'
  V2016 = 'v2016'

  @classmethod
  def from_name(cls, name: str) -> 'ModelVersion':
    """Looks up a version by its name, e.g. 'v2005'."""
    try:
      return cls(name)
    except ValueError:
      raise errors.InvalidConfigurationError.from_choices(
          'version', name, [v.value for v in cls]
      ) from None


# The exponents (n₁, n₂) of κ for each version.
EXPONENTS = {
    ModelVersion.V1981: (3.0, 3.0),
    ModelVersion.V1996: (2.0, 3.0),
    ModelVersion.V2005: (2.0, 2.0),
    ModelVersion.V2016: (2.0, 2.0),
}


class MixingState(NamedTuple):
  """The state of the fine structures in each cell."""
  # The mass fraction of the fine structures, in [0, 1).
  gamma_l: FlowFieldVal
  # The mean residence time in the fine structures, in units of s.
  tau: FlowFieldVal
  # The reacting fraction of the fine structures.
  kappa: FlowFieldVal


def kappa(
    gamma_l: Union[float, tf.Tensor],
    exp1: float,
    exp2: float,
) -> tf.Tensor:
  """Computes κ = γ_L^exp1 / (1 - γ_L^exp2), with γ_L clamped below 1."""
  gamma_l = tf.clip_by_value(
      tf.convert_to_tensor(gamma_l, dtype=types.TF_DTYPE), 0.0,
      1.0 - GAMMA_L_EPS)
  return tf.math.pow(gamma_l, exp1) / (1.0 - tf.math.pow(gamma_l, exp2))


class FineStructureMixingModel:
  """Computes the fine-structure state for a selected EDC version."""

  def __init__(
      self,
      version: ModelVersion,
      c1: float = C1_DEFAULT,
      c2: float = C2_DEFAULT,
  ):
    """Initializes the mixing model.

    Args:
      version: The version of the EDC model.
      c1: The constant for the local C_τ of the v2016 model.
      c2: The constant for the local C_γ of the v2016 model.
    """
    self.version = version
    self.exp1, self.exp2 = EXPONENTS[version]
    self.c1 = c1
    self.c2 = c2

  @property
  def uses_local_constants(self) -> bool:
    return self.version == ModelVersion.V2016

  def _coefficients(
      self,
      epsilon: tf.Tensor,
      tke: tf.Tensor,
      nu: tf.Tensor,
      t_c: Optional[tf.Tensor],
  ):
    """Returns C_γ and C_τ."""
    if not self.uses_local_constants:
      return C_GAMMA, C_TAU

    if t_c is None:
      raise errors.InvalidInputError(
          'The v2016 EDC model requires the chemical time scale `t_c`.'
      )
    t_c = tf.convert_to_tensor(t_c, dtype=types.TF_DTYPE)
    da = tf.clip_by_value(
        tf.math.sqrt(nu / (epsilon + constants.SMALL)) /
        (t_c + constants.SMALL), _DA_MIN, _DA_MAX)
    re_t = tf.math.square(tke) / (nu * epsilon + constants.SMALL)
    c_tau = tf.minimum(self.c1 / (da * tf.math.sqrt(re_t + 1.0)), C_GAMMA)
    c_gamma = tf.clip_by_value(
        self.c2 * tf.math.sqrt(da * (re_t + 1.0)), _C_GAMMA_MIN, _C_GAMMA_MAX)
    return c_gamma, c_tau

  def compute_mixing(
      self,
      epsilon: FlowFieldVal,
      tke: FlowFieldVal,
      nu: Union[float, FlowFieldVal],
      t_c: Optional[FlowFieldVal] = None,
  ) -> MixingState:
    """Computes γ_L, τ*, and κ in every cell.

    Cells without turbulence (k ≤ 0, ε ≤ 0, or ν ≤ 0) hold no fine structures:
    γ_L, τ* and κ are all 0 there.

    Args:
      epsilon: The turbulent dissipation rate, in units of m²/s³.
      tke: The turbulent kinetic energy, in units of m²/s².
      nu: The kinematic viscosity, in units of m²/s.
      t_c: The chemical time scale, in units of s. Required by v2016 only.

    Returns:
      The `MixingState` of all cells.
    """
    epsilon = tf.convert_to_tensor(epsilon, dtype=types.TF_DTYPE)
    tke = tf.convert_to_tensor(tke, dtype=types.TF_DTYPE)
    nu = tf.broadcast_to(
        tf.convert_to_tensor(nu, dtype=types.TF_DTYPE), tf.shape(epsilon))

    active = tf.logical_and(
        tf.logical_and(tf.greater(tke, 0.0), tf.greater(epsilon, 0.0)),
        tf.greater(nu, 0.0),
    )
    # Inactive cells are evaluated with unit values and masked afterwards, so
    # that no NaN is produced on either branch of `tf.where`.
    epsilon_safe = tf.where(active, epsilon, tf.ones_like(epsilon))
    tke_safe = tf.where(active, tke, tf.ones_like(tke))
    nu_safe = tf.where(active, nu, tf.ones_like(nu))

    c_gamma, c_tau = self._coefficients(epsilon_safe, tke_safe, nu_safe, t_c)

    gamma_l = c_gamma * tf.math.pow(
        nu_safe * epsilon_safe / tf.math.square(tke_safe), 0.25)
    gamma_l = tf.clip_by_value(gamma_l, 0.0, 1.0 - GAMMA_L_EPS)
    tau = c_tau * tf.math.sqrt(nu_safe / epsilon_safe)

    zeros = tf.zeros_like(epsilon)
    gamma_l = tf.where(active, gamma_l, zeros)
    tau = tf.where(active, tau, zeros)
    return MixingState(
        gamma_l=gamma_l,
        tau=tau,
        kappa=kappa(gamma_l, self.exp1, self.exp2),
    )
