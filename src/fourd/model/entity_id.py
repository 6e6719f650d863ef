# SPDX-License-Identifier: MIT

from typing import TypeAlias

ActivityId: TypeAlias = str
ElementStableId: TypeAlias = str
NativeId: TypeAlias = int | str
