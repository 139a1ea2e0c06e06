# Copyright contributors to the ITBench project. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from typing import Iterable, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from channel_readiness.models.status import READY, ConditionSeverityEnum


class ConditionRegistry(BaseModel):
    """Immutable declaration of the conditions a resource kind carries.

    ``dependents`` roll up into the ``happy`` condition in declaration order.
    ``auxiliary`` types may be marked on the resource but never feed the
    aggregate, and ``info`` names the dependents whose failures do not block it.
    """

    model_config = ConfigDict(frozen=True)

    happy: str = Field(READY, description="The aggregate condition type derived from the dependents.")
    dependents: Tuple[str, ...] = Field(..., description="Dependent condition types in declaration order.")
    auxiliary: Tuple[str, ...] = Field((), description="Known condition types which never roll up into the aggregate.")
    info: Tuple[str, ...] = Field((), description="Dependents with Info severity.")

    @model_validator(mode="after")
    def validate_declaration(self):
        if len(self.dependents) == 0:
            raise ConditionConfigError("at least one dependent condition must be declared", self.happy)
        seen: List[str] = []
        for type in self.dependents + self.auxiliary:
            if not type:
                raise ConditionConfigError("condition type must not be empty", self.happy)
            if type == self.happy:
                raise ConditionConfigError(f"'{type}' is reserved for the aggregate condition", self.happy)
            if type in seen:
                raise ConditionConfigError(f"'{type}' is declared more than once", self.happy)
            seen.append(type)
        for type in self.info:
            if type not in self.dependents:
                raise ConditionConfigError(f"Info severity is declared for '{type}' which is not a dependent", self.happy)
        return self

    @classmethod
    def declare_dependents(
        cls, *types: str, happy: str = READY, auxiliary: Iterable[str] = (), info: Iterable[str] = ()
    ) -> "ConditionRegistry":
        return cls(happy=happy, dependents=tuple(types), auxiliary=tuple(auxiliary), info=tuple(info))

    def is_dependent(self, type: str) -> bool:
        return type in self.dependents

    def is_registered(self, type: str) -> bool:
        return type in self.dependents or type in self.auxiliary

    def severity_of(self, type: str) -> ConditionSeverityEnum:
        if type in self.info or type in self.auxiliary:
            return ConditionSeverityEnum.Info
        return ConditionSeverityEnum.Error

    def blocking_dependents(self) -> List[str]:
        return [x for x in self.dependents if self.severity_of(x) == ConditionSeverityEnum.Error]

    def require(self, type: str) -> str:
        if type == self.happy:
            raise UnregisteredConditionError(f"'{type}' is derived from the dependents and cannot be set directly", self.happy)
        if not self.is_registered(type):
            raise UnregisteredConditionError(f"'{type}' is not a registered condition type", self.happy)
        return type


class ConditionConfigError(Exception):

    def __init__(self, message: str, happy: str):
        self.message = message
        self.happy = happy
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        return f"Condition set [{self.happy}] error: {self.message}"


class UnregisteredConditionError(ConditionConfigError):
    pass
