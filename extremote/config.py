# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# -----------------------------------------------------------------------------
# Imports
# -----------------------------------------------------------------------------
from __future__ import annotations
import copy
from dataclasses import dataclass
import json
import logging
from typing import Any, Dict, Optional


# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Constants
# -----------------------------------------------------------------------------
DEFAULT_BACKEND_TIMEOUT = 2.0


# -----------------------------------------------------------------------------
@dataclass
class ExtRemoteConfiguration:
    # Upper bound, in seconds, for every call to the media control backend.
    backend_timeout: Optional[float] = DEFAULT_BACKEND_TIMEOUT

    # Text returned in place of a track title/artist/album that could not be
    # fetched. When None, the backend error description is returned instead.
    metadata_error_text: Optional[str] = None

    def load_from_dict(self, config: Dict[str, Any]) -> None:
        config = copy.deepcopy(config)

        if 'backend_timeout' in config:
            backend_timeout = config.pop('backend_timeout')
            self.backend_timeout = (
                None if backend_timeout is None else float(backend_timeout)
            )

        if 'metadata_error_text' in config:
            self.metadata_error_text = config.pop('metadata_error_text')

        for name in config:
            logger.warning(f'ignoring unknown configuration property: {name}')

    def load_from_file(self, filename: str) -> None:
        with open(filename, 'r', encoding='utf-8') as file:
            self.load_from_dict(json.load(file))

    @classmethod
    def from_file(cls, filename: str) -> ExtRemoteConfiguration:
        config = cls()
        config.load_from_file(filename)
        return config

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> ExtRemoteConfiguration:
        instance = cls()
        instance.load_from_dict(config)
        return instance
