from __future__ import annotations

import logging

from openpyxl import load_workbook

from stockjournal.domain.errors import ValidationError
from stockjournal.domain.models import MovementType, parse_decimal
from stockjournal.domain.transfer import TransferBalancer

log = logging.getLogger(__name__)

REQUIRED_HEADERS = ("sku", "quantity")


class ExcelService:
    def import_lines(self, path: str, draft):
        """
        Append one movement line per worksheet row to ``draft``.
        Headers:
          sku | movement_type | quantity | rate | batch_number | remarks
        Only sku and quantity are required. For transfers movement_type picks
        the side (out -> FROM, in -> TO). A blank rate keeps the product's
        purchase rate.

        Returns (draft, ok, skipped).
        """
        wb = load_workbook(path, read_only=True, data_only=True)
        try:
            ws = wb.active
            rows = ws.iter_rows(values_only=True)
            header_row = next(rows, None) or ()

            headers = {}
            for idx, v in enumerate(header_row):
                if isinstance(v, str):
                    headers[v.strip().lower()] = idx

            for r in REQUIRED_HEADERS:
                if r not in headers:
                    raise ValidationError([], f"Missing column header: {r}")

            def cell(row, name):
                idx = headers.get(name)
                if idx is None or idx >= len(row):
                    return None
                return row[idx]

            ok = 0
            skipped = 0
            for row_no, row in enumerate(rows, start=2):
                sku = cell(row, "sku")
                if not sku:
                    skipped += 1
                    continue
                product = draft.catalog.get_by_sku(str(sku))
                if product is None:
                    log.warning("Excel import skipped row %s: unknown SKU %s", row_no, sku)
                    skipped += 1
                    continue
                quantity = parse_decimal(cell(row, "quantity"))
                if quantity <= 0:
                    log.warning("Excel import skipped row %s: invalid quantity %r", row_no, cell(row, "quantity"))
                    skipped += 1
                    continue

                raw_movement = str(cell(row, "movement_type") or "").strip().lower()
                try:
                    movement = MovementType(raw_movement) if raw_movement else None
                except ValueError:
                    log.warning("Excel import skipped row %s: invalid movement type %r", row_no, raw_movement)
                    skipped += 1
                    continue

                if isinstance(draft, TransferBalancer):
                    if movement is MovementType.IN:
                        draft, local_id = draft.add_to_line()
                    else:
                        draft, local_id = draft.add_from_line()
                else:
                    draft, local_id = draft.add_line()
                    if movement is not None:
                        draft = draft.set_movement_type(local_id, movement)

                draft = draft.set_product(local_id, product.id)
                draft = draft.set_quantity(local_id, quantity)
                rate = cell(row, "rate")
                if rate not in (None, ""):
                    draft = draft.set_rate(local_id, rate)
                batch = cell(row, "batch_number")
                if batch not in (None, ""):
                    draft = draft.set_batch_number(local_id, str(batch).strip())
                remarks = cell(row, "remarks")
                if remarks not in (None, ""):
                    draft = draft.set_remarks(local_id, str(remarks).strip())
                ok += 1
        finally:
            wb.close()

        log.info("excel_lines_imported path=%s ok=%s skipped=%s", path, ok, skipped)
        return draft, ok, skipped
