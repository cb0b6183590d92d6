# Copyright 2026 Firefly Software Solutions Inc.
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
"""spanweave instrument — option parsing, shape analysis and wrapper synthesis."""

from spanweave.instrument.decorators import instrument
from spanweave.instrument.formatting import format_value
from spanweave.instrument.parser import (
    ErrorCapture,
    Expression,
    FieldSpec,
    InstrumentConfig,
    parse_config,
)
from spanweave.instrument.signature import (
    BindingKind,
    FunctionDescriptor,
    ParameterBinding,
    WeavingProfile,
    analyze_function,
)
from spanweave.instrument.synthesizer import (
    AttributeInstruction,
    AttributeSource,
    WrapperPlan,
    WrapperSynthesizer,
)

__all__ = [
    "AttributeInstruction",
    "AttributeSource",
    "BindingKind",
    "ErrorCapture",
    "Expression",
    "FieldSpec",
    "FunctionDescriptor",
    "InstrumentConfig",
    "ParameterBinding",
    "WeavingProfile",
    "WrapperPlan",
    "WrapperSynthesizer",
    "analyze_function",
    "format_value",
    "instrument",
    "parse_config",
]
