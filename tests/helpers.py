
import json

from opentelemetry.trace import SpanKind

BASE_URL = "http://testserver"


def sample_order(order_id="ORD-123"):
    return {
        "order_id": order_id,
        "shipping_tracking_id": "TRK-0042",
        "shipping_cost": {"currency_code": "USD", "units": 5, "nanos": 500000000},
        "shipping_address": {
            "street_address": "1600 Amphitheatre Parkway",
            "city": "Mountain View",
        },
        "items": [
            {
                "item": {"product_id": "OLJCESPC7Z", "quantity": 2},
                "cost": {"currency_code": "USD", "units": "19", "nanos": 990000000},
            }
        ],
    }


def read_logs(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


def server_span(spans):
    return next(s for s in spans if s.kind == SpanKind.SERVER)


def span_named(spans, name):
    return next(s for s in spans if s.name == name)
