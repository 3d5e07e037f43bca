"""Cart configuration, passed explicitly into the cart manager."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from shopcart.domain.service.archival_coordinator import DEFAULT_HISTORY_KEY

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class CartConfig:
    """Feature toggles and session key names.

    ``attach_actor_on_start``: when a cart is started for a signed-in
    actor, record that actor as the order's member.
    """

    session_key: str = "shoppingcartid"
    history_key: str = DEFAULT_HISTORY_KEY
    attach_actor_on_start: bool = True

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> CartConfig:
        env = os.environ if environ is None else environ
        defaults = CartConfig()
        attach = env.get("SHOPCART_ATTACH_ACTOR")
        return CartConfig(
            session_key=env.get("SHOPCART_SESSION_KEY", defaults.session_key),
            history_key=env.get("SHOPCART_HISTORY_KEY", defaults.history_key),
            attach_actor_on_start=(
                defaults.attach_actor_on_start
                if attach is None
                else attach.strip().lower() in _TRUE_VALUES
            ),
        )
