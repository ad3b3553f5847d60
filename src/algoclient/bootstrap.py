from __future__ import annotations

import importlib
import sys
from typing import Iterable


def load_handler_modules(modules: Iterable[str], *, reload: bool = False) -> None:
    """Import handler modules so their ``@register_handler`` decorators run.

    Already-imported modules are cheap to import again. In tests, call with
    reload=True after ``HandlerRegistry.clear()`` to re-run the decorators.
    """
    for module_name in modules:
        if reload:
            sys.modules.pop(module_name, None)
        importlib.import_module(module_name)
