# salon/init_db.py
"""
Bootstrap the database: create tables and, on request, seed a demo catalog.

    python -m salon.init_db          # tables only
    python -m salon.init_db --demo   # tables + demo services/staff
"""

import sys

from sqlalchemy.orm import Session

from .models.generated import (
    Base,
    Combos,
    ComboServices,
    EmployeeSchedules,
    Employees,
    ServiceCategories,
    Services,
    t_employee_services,
)


# ======================================================
# SCHEMA
# ======================================================

def create_schema(engine) -> None:
    Base.metadata.create_all(engine)


# ======================================================
# DEMO DATA
# ======================================================

def seed_demo(db: Session) -> bool:
    """
    Insert a small catalog and two employees.

    Returns:
        False if services already exist (nothing inserted).
    """
    if db.query(Services.id).first() is not None:
        return False

    hair = ServiceCategories(name="Cabello", display_order=1)
    nails = ServiceCategories(name="Uñas", display_order=2)
    db.add_all([hair, nails])
    db.flush()

    haircut = Services(name="Corte", duration_minutes=60, price_cents=1200000, category_id=hair.id)
    color = Services(name="Tinte", duration_minutes=90, price_cents=2500000, category_id=hair.id)
    manicure = Services(name="Manicura", duration_minutes=30, price_cents=800000, category_id=nails.id)
    db.add_all([haircut, color, manicure])
    db.flush()

    combo = Combos(name="Día de spa", total_price_cents=2500000, original_price_cents=2800000)
    db.add(combo)
    db.flush()
    db.add_all([
        ComboServices(combo_id=combo.id, service_id=haircut.id, quantity=1),
        ComboServices(combo_id=combo.id, service_id=manicure.id, quantity=2),
    ])

    stylist = Employees(full_name="Estilista Principal")
    nail_tech = Employees(full_name="Manicurista")
    db.add_all([stylist, nail_tech])
    db.flush()

    db.execute(t_employee_services.insert(), [
        {"employee_id": stylist.id, "service_id": haircut.id},
        {"employee_id": stylist.id, "service_id": color.id},
        {"employee_id": stylist.id, "service_id": manicure.id},
        {"employee_id": nail_tech.id, "service_id": manicure.id},
    ])

    # Monday..Saturday 09:00-18:00
    db.add_all([
        EmployeeSchedules(employee_id=e.id, day_of_week=day, start_time="09:00", end_time="18:00")
        for e in (stylist, nail_tech)
        for day in range(6)
    ])

    db.commit()
    return True


# ======================================================
# MAIN
# ======================================================

def main(argv: list[str] | None = None) -> None:
    from .database import SessionLocal, engine

    argv = sys.argv[1:] if argv is None else argv

    create_schema(engine)
    print(f"[INIT] Schema ready ({engine.url})")

    if "--demo" in argv:
        db = SessionLocal()
        try:
            if seed_demo(db):
                print("[INIT] Demo catalog created")
            else:
                print("[INIT] Services already exist, demo data skipped")
        finally:
            db.close()


if __name__ == "__main__":
    main()
