from sqlalchemy import Column, ForeignKey, Integer, Table, Text, UniqueConstraint, text

from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class ServiceCategories(Base):
    __tablename__ = 'service_categories'

    name = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    display_order = Column(Integer, nullable=False, server_default=text('0'))
    is_active = Column(Integer, nullable=False, server_default=text('1'))

    services = relationship('Services', back_populates='category')


class Services(Base):
    __tablename__ = 'services'

    name = Column(Text, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    price_cents = Column(Integer, nullable=False)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)
    description = Column(Text)
    category_id = Column(ForeignKey('service_categories.id', ondelete='SET NULL'))
    variable_price = Column(Integer, nullable=False, server_default=text('0'))

    category = relationship('ServiceCategories', back_populates='services')
    combo_services = relationship('ComboServices', back_populates='service')
    discounts = relationship('Discounts', back_populates='service')
    reservations = relationship('Reservations', back_populates='service')


class Combos(Base):
    __tablename__ = 'combos'

    name = Column(Text, nullable=False)
    total_price_cents = Column(Integer, nullable=False)
    original_price_cents = Column(Integer, nullable=False)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)
    description = Column(Text)
    start_date = Column(Text)
    end_date = Column(Text)

    combo_services = relationship(
        'ComboServices',
        back_populates='combo',
        order_by='ComboServices.id',
    )
    reservations = relationship('Reservations', back_populates='combo')


class ComboServices(Base):
    __tablename__ = 'combo_services'

    combo_id = Column(ForeignKey('combos.id', ondelete='CASCADE'), nullable=False)
    service_id = Column(ForeignKey('services.id', ondelete='CASCADE'), nullable=False)
    quantity = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)

    combo = relationship('Combos', back_populates='combo_services')
    service = relationship('Services', back_populates='combo_services')


class Discounts(Base):
    __tablename__ = 'discounts'

    service_id = Column(ForeignKey('services.id', ondelete='CASCADE'), nullable=False)
    name = Column(Text, nullable=False)
    discount_type = Column(Text, nullable=False)  # percentage / flat
    discount_value = Column(Integer, nullable=False)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    is_public = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)
    description = Column(Text)
    discount_code = Column(Text)
    start_date = Column(Text)
    end_date = Column(Text)

    service = relationship('Services', back_populates='discounts')


class Employees(Base):
    __tablename__ = 'employees'

    full_name = Column(Text, nullable=False)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)
    email = Column(Text)
    phone = Column(Text)

    schedules = relationship('EmployeeSchedules', back_populates='employee')
    blocked_times = relationship('BlockedTimes', back_populates='employee')
    reservations = relationship('Reservations', back_populates='employee')


t_employee_services = Table(
    'employee_services', metadata,
    Column('employee_id', ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
    Column('service_id', ForeignKey('services.id', ondelete='CASCADE'), nullable=False),
    UniqueConstraint('employee_id', 'service_id')
)


class EmployeeSchedules(Base):
    __tablename__ = 'employee_schedules'

    employee_id = Column(ForeignKey('employees.id', ondelete='CASCADE'), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0 = Monday, 6 = Sunday
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    is_available = Column(Integer, nullable=False, server_default=text('1'))
    id = Column(Integer, primary_key=True)

    employee = relationship('Employees', back_populates='schedules')


class BlockedTimes(Base):
    __tablename__ = 'blocked_times'

    employee_id = Column(ForeignKey('employees.id', ondelete='CASCADE'), nullable=False)
    date = Column(Text, nullable=False)
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    reason = Column(Text)

    employee = relationship('Employees', back_populates='blocked_times')


class Reservations(Base):
    __tablename__ = 'reservations'

    employee_id = Column(ForeignKey('employees.id', ondelete='CASCADE'), nullable=False)
    service_id = Column(ForeignKey('services.id'))  # nullable for combo bookings
    combo_id = Column(ForeignKey('combos.id'))
    appointment_date = Column(Text, nullable=False)
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'pending'"))
    is_guest_booking = Column(Integer, nullable=False, server_default=text('0'))
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    id = Column(Integer, primary_key=True)
    client_id = Column(Integer)
    customer_name = Column(Text)
    customer_email = Column(Text)
    customer_phone = Column(Text)
    final_price_cents = Column(Integer)
    notes = Column(Text)

    employee = relationship('Employees', back_populates='reservations')
    service = relationship('Services', back_populates='reservations')
    combo = relationship('Combos', back_populates='reservations')
