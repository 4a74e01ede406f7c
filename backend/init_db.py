"""
Database initialization script
Run this to create tables and seed demo chatters, creators and sales
"""
import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from agency_os.core.database import engine, Base, SessionLocal
from agency_os.models import (
    User, UserRole, Creator, CreatorCompensationType, Sale, SaleType, Payment, MonthlyFinancial,
)


def init_db():
    """Initialize database with tables"""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("✓ Tables created successfully")


def seed_data():
    """Seed demo data"""
    db = SessionLocal()

    try:
        print("\nSeeding initial data...")

        admin = db.query(User).filter(User.email == "admin@agency.local").first()
        if not admin:
            admin = User(email="admin@agency.local", full_name="Agency Admin", role=UserRole.ADMIN.value)
            db.add(admin)
            print("✓ Admin user created")

        chatter = db.query(User).filter(User.email == "giulia@agency.local").first()
        if not chatter:
            chatter = User(
                email="giulia@agency.local",
                full_name="Giulia Rossi",
                role=UserRole.CHATTER.value,
                commission_percent=Decimal("10"),
            )
            db.add(chatter)
            print("✓ Commission chatter created (10%)")

        salaried = db.query(User).filter(User.email == "marco@agency.local").first()
        if not salaried:
            salaried = User(
                email="marco@agency.local",
                full_name="Marco Bianchi",
                role=UserRole.CHATTER_MANAGER.value,
                fixed_salary=Decimal("1500"),
            )
            db.add(salaried)
            print("✓ Salaried chatter manager created (1500/month)")

        creator = db.query(Creator).filter(Creator.name == "Luna").first()
        if not creator:
            creator = Creator(
                name="Luna",
                compensation_type=CreatorCompensationType.REVENUE_SHARE.value,
                revenue_share_percent=Decimal("50"),
                platform_commission_percent=20,
            )
            db.add(creator)
            print("✓ Revenue-share creator created (50%)")

        cashback_creator = db.query(Creator).filter(Creator.name == "Aurora").first()
        if not cashback_creator:
            cashback_creator = Creator(
                name="Aurora",
                compensation_type=CreatorCompensationType.FIXED_COST.value,
                fixed_salary_cost=Decimal("2000"),
                platform_commission_percent=15,
            )
            db.add(cashback_creator)
            print("✓ Fixed-cost creator created (15% platform fee, 5% cashback)")

        db.flush()

        if not db.query(Sale).first():
            now = datetime.now(timezone.utc)
            demo_sales = [
                (chatter, creator, Decimal("120"), Decimal("0"), SaleType.PPV),
                (chatter, creator, Decimal("45"), Decimal("0"), SaleType.TIP),
                (chatter, cashback_creator, Decimal("300"), Decimal("0"), SaleType.CUSTOM),
                (salaried, cashback_creator, Decimal("80"), Decimal("0"), SaleType.INITIAL),
                (salaried, creator, Decimal("0"), Decimal("25"), SaleType.BASE),
            ]
            for i, (agent, owner, amount, base, kind) in enumerate(demo_sales):
                db.add(Sale(
                    agent_id=agent.id,
                    creator_id=owner.id,
                    amount=amount,
                    base_amount=base,
                    sale_type=kind.value,
                    sale_date=now - timedelta(days=i),
                ))
            db.add(Payment(agent_id=chatter.id, amount=Decimal("20"), payment_date=now))
            print(f"✓ {len(demo_sales)} demo sales and 1 payment created")

            db.add(MonthlyFinancial(
                creator_id=creator.id,
                year=now.year,
                month=now.month,
                marketing_costs=Decimal("150"),
                tool_costs=Decimal("30"),
                other_costs=Decimal("0"),
                custom_costs=[{"label": "Photographer", "amount": "200"}],
            ))
            print("✓ Demo monthly financials created")

        db.commit()
        print("\n✓ Database seeded successfully!")

    except Exception as e:
        print(f"\n✗ Error seeding data: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    print("=" * 60)
    print("Creator Agency OS - Database Initialization")
    print("=" * 60)

    init_db()
    seed_data()

    print("\n" + "=" * 60)
    print("Initialization complete!")
    print("  - API: http://localhost:8000")
    print("  - API Docs: http://localhost:8000/docs")
    print("=" * 60)
