"""Module and function names whose findings are ignored."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class WhitelistChecker:
    ignored_modules: set = field(default_factory=set)
    ignored_functions: set = field(default_factory=set)

    def should_ignore(self, module: str, function: str) -> bool:
        """True if either the module or the function is whitelisted."""
        return module in self.ignored_modules or function in self.ignored_functions