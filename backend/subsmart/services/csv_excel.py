import csv
import io

from fastapi import UploadFile
from pydantic import ValidationError
from openpyxl import Workbook
from sqlalchemy.ext.asyncio import AsyncSession

from subsmart.models.subscription import Subscription
from subsmart.schemas.data_export import ImportResult
from subsmart.schemas.subscription import SubscriptionCreate

EXPORT_COLUMNS = [
    "name", "price", "currency", "billing_cycle", "first_bill_date",
    "category", "active", "description", "website_url",
]


def _row(s: Subscription) -> list:
    return [
        s.name,
        str(s.price),
        s.currency,
        s.billing_cycle.value,
        s.first_bill_date.isoformat() if s.first_bill_date else "",
        s.category.value,
        s.active,
        s.description or "",
        s.website_url or "",
    ]


def export_subscriptions_csv(subscriptions: list) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(EXPORT_COLUMNS)
    for s in subscriptions:
        writer.writerow(_row(s))
    return output.getvalue()


def export_subscriptions_xlsx(subscriptions: list) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Subscriptions"
    ws.append(EXPORT_COLUMNS)
    for s in subscriptions:
        row = _row(s)
        row[1] = float(s.price)
        ws.append(row)
    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


class ImportFileError(ValueError):
    """The uploaded file cannot be read as a CSV export."""


async def import_subscriptions_from_file(file: UploadFile, db: AsyncSession) -> ImportResult:
    content = await file.read()
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ImportFileError("File must be a UTF-8 encoded CSV") from e
    reader = csv.DictReader(io.StringIO(text))
    total = 0
    imported = 0
    skipped = 0
    errors: list[str] = []
    for row in reader:
        total += 1
        values = {k: v.strip() for k, v in row.items() if k in EXPORT_COLUMNS and v and v.strip()}
        if not values.get("name"):
            skipped += 1
            errors.append(f"Row {total}: name is empty")
            continue
        if "active" in values:
            values["active"] = values["active"].lower() in ("true", "1", "yes")
        try:
            data = SubscriptionCreate.model_validate(values)
        except ValidationError as e:
            skipped += 1
            err = e.errors()[0]
            field = ".".join(str(p) for p in err["loc"]) or "row"
            errors.append(f"Row {total}: {field}: {err['msg']}")
            continue
        db.add(Subscription(**data.model_dump()))
        imported += 1
    await db.flush()
    return ImportResult(total_rows=total, imported=imported, skipped=skipped, errors=errors)
