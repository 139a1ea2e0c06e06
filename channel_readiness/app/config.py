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

import os
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_CLUSTER_DOMAIN = os.getenv("CLUSTER_DOMAIN", "cluster.local")
DEFAULT_URL_SCHEME = "http"

PROJECT_LOG_LEVEL = os.getenv("PROJECT_LOG_LEVEL", "")
ROOT_LOG_LEVEL = os.getenv("ROOT_LOG_LEVEL", "")


class AppConfig(BaseSettings):
    cluster_domain: Optional[str] = Field(DEFAULT_CLUSTER_DOMAIN, description="Cluster domain used to build the channel hostname.")
    url_scheme: Optional[str] = Field(DEFAULT_URL_SCHEME, description="URL scheme of the channel address. Default is http.")
    emit_transition_events: Optional[bool] = Field(
        True, description="Specifies whether to notify the observer of every condition transition during a reconcile pass."
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "CHANNEL_READINESS_"
