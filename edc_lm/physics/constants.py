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

"""A library of commonly used physical constants."""

# Universal gas constant, in units of J/mol/K.
R_UNIVERSAL = 8.3145

# A small number that guards divisions by quantities that may vanish.
SMALL = 1e-15

# The kinematic viscosity of air at room temperature, in units of m^2/s.
NU_AIR = 1.5e-5
