from __future__ import annotations

from storyforge.models.setting import Setting
from storyforge.services.base import ScopedService


class SettingService(ScopedService[Setting]):
    model = Setting
    label = "Setting"
    list_sort = [("name", 1)]
