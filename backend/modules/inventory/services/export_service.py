"""Выгрузка инвентаря в CSV и Excel (openpyxl)."""

import csv
import io
from typing import List

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet
from sqlalchemy import case, func
from sqlalchemy.orm import Session, joinedload

from backend.modules.inventory.constants import UNASSIGNED_TERRITORY
from backend.modules.inventory.models import Employee, Equipment
from backend.modules.inventory.services.stats_service import compute_inventory_stats
from backend.modules.inventory.services.transaction import reading

CSV_COLUMNS = [
    "id",
    "type",
    "type_id",
    "brand",
    "model",
    "serial_number",
    "state",
    "purchase_date",
    "employee_id",
    "employee_label",
    "comment",
    "invoice_ref",
    "created_at",
    "updated_at",
]

EQUIPMENT_COLUMNS = [
    "ID",
    "Type",
    "Brand",
    "Model",
    "Serial number",
    "State",
    "Purchase date",
    "Purchase place",
    "Price (EUR)",
    "Warranty (years)",
    "Employee",
    "Email",
    "Phone",
    "Role",
    "Territory",
    "Comment",
]

EMPLOYEE_COLUMNS = [
    "Employee",
    "Territory",
    "Role",
    "Email",
    "Phone",
    "Equipment count",
    "Assigned equipment",
    "Comment",
]

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
SECTION_FONT = Font(bold=True, size=12)
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)


def _csv_value(value) -> str:
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def build_equipment_csv(db: Session) -> str:
    """CSV всего оборудования по id; все значения в кавычках."""
    with reading(db):
        items = (
            db.query(Equipment)
            .options(joinedload(Equipment.type_ref))
            .order_by(Equipment.id.asc())
            .all()
        )
        rows = [
            [
                item.id,
                item.resolved_type_label,
                item.type_id,
                item.brand,
                item.model,
                item.serial_number,
                item.state,
                item.purchase_date,
                item.employee_id,
                item.employee_label,
                item.comment,
                item.invoice_ref,
                item.created_at,
                item.updated_at,
            ]
            for item in items
        ]

    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for row in rows:
        writer.writerow([_csv_value(v) for v in row])
    return output.getvalue()


def _style_header(ws: Worksheet, row: int, columns: List[str]) -> None:
    for col_idx, column in enumerate(columns, 1):
        cell = ws.cell(row=row, column=col_idx, value=column)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = THIN_BORDER


def _new_sheet(wb: Workbook, title: str, columns: List[str]) -> Worksheet:
    ws = wb.create_sheet(title)
    _style_header(ws, 1, columns)
    for col_idx, column in enumerate(columns, 1):
        letter = ws.cell(row=1, column=col_idx).column_letter
        ws.column_dimensions[letter].width = max(15, len(column) + 5)
    ws.freeze_panes = "A2"
    return ws


def _fill_equipment_sheet(db: Session, ws: Worksheet) -> None:
    items = (
        db.query(Equipment)
        .options(joinedload(Equipment.type_ref), joinedload(Equipment.employee))
        .order_by(
            case((Equipment.purchase_date.is_(None), 1), else_=0),
            Equipment.purchase_date.asc(),
            Equipment.id.asc(),
        )
        .all()
    )
    for item in items:
        employee = item.employee
        ws.append(
            [
                item.id,
                item.resolved_type_label,
                item.brand,
                item.model,
                item.serial_number or "",
                item.state,
                item.purchase_date.isoformat() if item.purchase_date else "",
                item.purchase_place or "",
                item.price if item.price is not None else "",
                item.warranty_years if item.warranty_years is not None else "",
                employee.display_name if employee else "",
                (employee.email or "") if employee else "",
                (employee.phone or "") if employee else "",
                (employee.role or "") if employee else "",
                employee.territory if employee else "",
                item.comment or "",
            ]
        )


def _fill_employee_sheet(db: Session, ws: Worksheet) -> None:
    employees = (
        db.query(Employee)
        .options(joinedload(Employee.equipment_items).joinedload(Equipment.type_ref))
        .order_by(
            Employee.territory.asc(),
            func.lower(Employee.last_name),
            func.lower(Employee.first_name),
        )
        .all()
    )
    for employee in employees:
        equipment = sorted(
            employee.equipment_items,
            key=lambda e: (e.purchase_date is None, e.purchase_date or "", e.id),
        )
        ws.append(
            [
                employee.display_name,
                employee.territory or "",
                employee.role or "",
                employee.email or "",
                employee.phone or "",
                len(equipment),
                " | ".join(f"{e.resolved_type_label} - {e.brand} {e.model}" for e in equipment),
                employee.comment or "",
            ]
        )


def _section(ws: Worksheet, title: str, columns: List[str], rows: List[list]) -> None:
    ws.append([title])
    ws.cell(row=ws.max_row, column=1).font = SECTION_FONT
    ws.append(columns)
    _style_header(ws, ws.max_row, columns)
    for row in rows:
        ws.append(row)
    ws.append([])


def _fill_statistics_sheet(db: Session, ws: Worksheet) -> None:
    stats = compute_inventory_stats(db, value_order=True)

    summary = [
        ["Total equipment", stats.total_count],
        ["Total value (EUR)", stats.total_value],
    ]
    if stats.total_count > 0:
        summary.append(
            ["Average value per item (EUR)", round(stats.total_value / stats.total_count, 2)]
        )
    summary.append(["Employees", stats.employee_count])
    summary.append(["Equipment types", stats.type_count])
    _section(ws, "SUMMARY", ["Metric", "Value"], summary)

    _section(
        ws,
        "STATE DISTRIBUTION",
        ["State", "Quantity"],
        [[row.state, row.count] for row in stats.state_distribution],
    )

    breakdown_columns = ["Quantity", "Estimated value (EUR)"]
    sections = [
        ("BY TERRITORY", "Territory", stats.by_territory),
        ("VALUE BY TYPE", "Type", stats.by_type),
        ("VALUE BY BRAND", "Brand", stats.by_brand),
        ("VALUE BY VENDOR", "Vendor", stats.by_vendor),
    ]
    for title, key_column, rows in sections:
        if not rows:
            continue
        _section(
            ws,
            title,
            [key_column] + breakdown_columns,
            [
                [
                    "Unassigned" if row.key == UNASSIGNED_TERRITORY else row.key,
                    row.count,
                    row.total_value,
                ]
                for row in rows
            ],
        )
    ws.column_dimensions["A"].width = 32
    ws.column_dimensions["B"].width = 15
    ws.column_dimensions["C"].width = 22


def build_inventory_workbook(db: Session) -> bytes:
    """Книга Excel: листы Equipment, Employees, Statistics."""
    wb = Workbook()
    wb.remove(wb.active)
    with reading(db):
        _fill_equipment_sheet(db, _new_sheet(wb, "Equipment", EQUIPMENT_COLUMNS))
        _fill_employee_sheet(db, _new_sheet(wb, "Employees", EMPLOYEE_COLUMNS))
    _fill_statistics_sheet(db, wb.create_sheet("Statistics"))

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()
