"""Login extension points.

Collaborators register async observers for a ``LoginHookPoint``. The login
use case dispatches them in registration order with a frozen
``LoginHookContext`` that carries whatever exists at that point:

* BEFORE_VERIFY: ``payload`` (unverified)
* PRE_SAVE: ``payload``, ``identity``
* AFTER_SAVE: ``payload``, ``identity``, ``account``, ``created``
* BEFORE_LOGIN / AFTER_LOGIN: as AFTER_SAVE; only fired when a new session
  is issued
* BEFORE_REDIRECT: as AFTER_SAVE plus ``redirect_to`` (the requested target)

Observers cannot change the flow's data. An exception raised by an observer
aborts the attempt.
"""

from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Optional

import logfire

from tglogin.domain.model.account import LocalAccount
from tglogin.domain.model.identity import ExternalIdentity, VerifiedIdentity
from tglogin.domain.value import LoginHookPoint
from tglogin.domain.value.common import ValueObject


class LoginHookContext(ValueObject):
    """Snapshot of a login attempt handed to observers."""

    point: LoginHookPoint
    payload: ExternalIdentity
    identity: Optional[VerifiedIdentity] = None
    account: Optional[LocalAccount] = None
    created: bool = False
    redirect_to: Optional[str] = None


LoginHook = Callable[[LoginHookContext], Awaitable[None]]


class LoginHooks:
    """Ordered observer lists keyed by extension point."""

    def __init__(self) -> None:
        self._hooks: dict[LoginHookPoint, list[LoginHook]] = defaultdict(list)

    def register(self, point: LoginHookPoint, hook: LoginHook) -> None:
        """Append an observer to an extension point."""
        self._hooks[point].append(hook)

    def hooks_for(self, point: LoginHookPoint) -> tuple[LoginHook, ...]:
        """Observers registered for a point, in call order."""
        return tuple(self._hooks.get(point, ()))

    async def dispatch(self, context: LoginHookContext) -> None:
        """Call every observer of ``context.point`` in order."""
        hooks = self.hooks_for(context.point)
        if not hooks:
            return

        with logfire.span(
            "login_hooks.dispatch", point=context.point.value, count=len(hooks)
        ):
            for hook in hooks:
                await hook(context)
