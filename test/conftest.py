import sys
from decimal import Decimal
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def make_catalog():
    from stockjournal.domain.catalog import ProductStockCatalog
    from stockjournal.domain.models import Product

    return ProductStockCatalog.of([
        Product(1, "Flour", "FL-1", Decimal("10"), Decimal("2.50"), "kg"),
        Product(2, "Sugar", "SU-1", Decimal("40"), Decimal("1.20"), "kg"),
        Product(3, "Bread", "BR-1", Decimal("0"), Decimal("4.00"), "pcs"),
    ])


def entry_payload(entry_id=7, status="draft", entry_type="consumption", items=None, **flags):
    payload = {
        "id": entry_id,
        "journal_number": f"SJ-{entry_id:04d}",
        "journal_date": "2024-03-01",
        "entry_type": entry_type,
        "status": status,
        "reference_number": None,
        "narration": "Kitchen use",
        "total_items": len(items or []),
        "total_amount": 25,
        "can_edit": status == "draft",
        "can_post": status == "draft",
        "can_cancel": status in ("draft", "posted"),
        "items": items if items is not None else [
            {
                "id": 1,
                "product_id": 1,
                "product": {"id": 1, "name": "Flour", "sku": "FL-1", "unit": "kg"},
                "movement_type": "out",
                "quantity": 4,
                "rate": 2.5,
                "amount": 10,
            }
        ],
    }
    payload.update(flags)
    return payload


class FakeGateway:
    """In-memory stand-in for HttpStockJournalGateway."""

    def __init__(self, entries=None, products=None):
        from stockjournal.repositories.serializers import entry_from_payload

        self._decode = entry_from_payload
        self.entries = {e["id"]: dict(e) for e in (entries or [])}
        self.products = list(make_catalog().products) if products is None else products
        self.calls = []
        self.fail_with = None
        self.next_id = 100

    def _check(self, name):
        self.calls.append(name)
        if self.fail_with is not None:
            raise self.fail_with

    def list_entries(self, params):
        from stockjournal.domain.models import JournalListPage, Pagination

        self._check(("list", params))
        rows = tuple(self._decode(e) for e in self.entries.values())
        return JournalListPage(rows, Pagination(1, 1, len(rows), len(rows)))

    def show(self, entry_id):
        self.calls.append(("show", entry_id))
        return self._decode(self.entries[entry_id])

    def form_data(self, entry_type=None):
        self.calls.append(("form_data", entry_type))
        return [], list(self.products)

    def create(self, payload):
        self._check(("create", payload))
        entry_id = self.next_id
        self.next_id += 1
        status = "posted" if payload["action"] == "save_and_post" else "draft"
        self.entries[entry_id] = entry_payload(entry_id, status=status, entry_type=payload["entry_type"])
        return self._decode(self.entries[entry_id])

    def update(self, entry_id, payload):
        self._check(("update", entry_id, payload))
        return self._decode(self.entries[entry_id])

    def post(self, entry_id):
        self._check(("post", entry_id))
        self.entries[entry_id].update(status="posted", can_post=False, can_edit=False)
        return None

    def cancel(self, entry_id):
        self._check(("cancel", entry_id))
        self.entries[entry_id].update(status="cancelled", can_post=False, can_cancel=False, can_edit=False)
        return None

    def delete(self, entry_id):
        self._check(("delete", entry_id))
        del self.entries[entry_id]


class FakeTimer:
    """threading.Timer replacement that fires only when told to."""

    created = []

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function()
