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

"""Commonly used types in the combustion closure."""

from typing import Any, Mapping, TypeAlias

import tensorflow as tf

# The floating-point type of all fields.
TF_DTYPE = tf.float32

# A 3D field in the `(nz, nx, ny)` layout supplied by the host solver.
FlowFieldVal: TypeAlias = tf.Tensor
FlowFieldMap: TypeAlias = Mapping[str, tf.Tensor]

# The dictionary entries handed over by the host configuration.
ConfigMap: TypeAlias = Mapping[str, Any]
