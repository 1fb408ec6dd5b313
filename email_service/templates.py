"""Rendering of the order-confirmation email body."""

from typing import Any, Dict, Mapping

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError, select_autoescape

from email_service.errors import RenderingFailure

CONFIRMATION_TEMPLATE = "confirmation.html"


def format_money(money: Mapping[str, Any]) -> str:
    """Money as {"currency_code", "units", "nanos"}; units may arrive as a string."""
    units = int(money.get("units", 0))
    nanos = int(money.get("nanos", 0))
    amount = units + nanos / 1_000_000_000
    return f"{amount:.2f} {money.get('currency_code', '')}".strip()


def build_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("email_service", "templates"),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
    )
    env.filters["money"] = format_money
    return env


_env = build_environment()


def render_confirmation(order: Dict[str, Any]) -> str:
    try:
        # bound separately: order["items"] on a dict falls back to dict.items
        return _env.get_template(CONFIRMATION_TEMPLATE).render(order=order, items=order.get("items"))
    except (TemplateError, TypeError, ValueError, AttributeError) as e:
        raise RenderingFailure(
            f"Could not render confirmation email: {e}",
            order_id=order.get("order_id"),
        ) from e
