import asyncio
import logging
from datetime import date, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.core import models
from app.core.database import AsyncSessionLocal, engine


# -----------------------------------------------------------------------------
# SEED MODULE - Demo clinic data
# Purpose: give the query gateway something to read in a fresh database
# Run after migrations: python -m app.core.seed
# -----------------------------------------------------------------------------

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def seed_clinic_data(db: AsyncSession) -> dict:
    """
    Insert organizations -> facilities -> doctors/patients -> insurances/visits.

    Returns the number of rows inserted per table.
    """
    org1 = models.Organization(
        name="Pacific Coast Health System",
        address="1200 Ocean Ave, Suite 400, San Francisco, CA 94112",
        phone="(415) 555-0100",
    )
    org2 = models.Organization(
        name="MetroCare Medical Group",
        address="3500 Peachtree Rd NE, Atlanta, GA 30326",
        phone="(404) 555-0200",
    )

    fac1 = models.Facility(
        organization=org1,
        name="SF Downtown Clinic",
        address="450 Market St, San Francisco, CA 94111",
        phone="(415) 555-0110",
    )
    fac2 = models.Facility(
        organization=org1,
        name="Oakland Medical Center",
        address="1800 Webster St, Oakland, CA 94612",
        phone="(510) 555-0120",
    )
    fac3 = models.Facility(
        organization=org2,
        name="Atlanta Midtown Practice",
        address="999 Peachtree St, Atlanta, GA 30309",
        phone="(404) 555-0210",
    )

    doc1 = models.Doctor(
        facility=fac1, first_name="Sarah", last_name="Mitchell",
        email="sarah.mitchell@pacifichealth.org", phone="(415) 555-1001",
        specialty="Internal Medicine",
    )
    doc2 = models.Doctor(
        facility=fac1, first_name="James", last_name="Chen",
        email="james.chen@pacifichealth.org", phone="(415) 555-1002",
        specialty="Cardiology",
    )
    doc3 = models.Doctor(
        facility=fac2, first_name="Emily", last_name="Rodriguez",
        email="emily.rodriguez@pacifichealth.org", phone="(510) 555-1003",
        specialty="Pediatrics",
    )
    doc4 = models.Doctor(
        facility=fac3, first_name="Michael", last_name="Thompson",
        email="michael.thompson@metrocare.org", phone="(404) 555-2001",
        specialty="Dermatology",
    )

    pat1 = models.Patient(
        facility=fac1, first_name="Jennifer", last_name="Williams",
        email="jennifer.williams@email.com", phone="(415) 555-3001",
        date_of_birth=date(1985, 3, 15),
        address="100 California St, San Francisco, CA 94111",
    )
    pat2 = models.Patient(
        facility=fac1, first_name="Robert", last_name="Davis",
        email="robert.davis@email.com", phone="(415) 555-3002",
        date_of_birth=date(1972, 7, 22),
        address="2500 Van Ness Ave, San Francisco, CA 94109",
    )
    pat3 = models.Patient(
        facility=fac2, first_name="Amanda", last_name="Martinez",
        email="amanda.martinez@email.com", phone="(510) 555-3003",
        date_of_birth=date(1990, 11, 8),
        address="3400 Broadway, Oakland, CA 94611",
    )
    pat4 = models.Patient(
        facility=fac2, first_name="David", last_name="Johnson",
        email="david.johnson@email.com",
        date_of_birth=date(1965, 1, 30),
        address="5555 Claremont Ave, Oakland, CA 94618",
    )
    pat5 = models.Patient(
        facility=fac3, first_name="Jessica", last_name="Brown",
        email="jessica.brown@email.com", phone="(404) 555-4001",
        date_of_birth=date(1998, 9, 12),
        address="1234 Piedmont Ave NE, Atlanta, GA 30309",
    )

    insurances = [
        models.Insurance(
            patient=pat1, provider_name="Blue Cross Blue Shield of California",
            policy_number="BCBS-CA-789012", group_number="GRP-1001",
            effective_date=date(2020, 1, 1), expiration_date=date(2025, 12, 31),
        ),
        models.Insurance(
            patient=pat1, provider_name="Aetna",
            policy_number="AET-SUP-456789", group_number="GRP-2001",
            effective_date=date(2022, 6, 1), expiration_date=date(2026, 5, 31),
        ),
        models.Insurance(
            patient=pat2, provider_name="Medicare",
            policy_number="1EG4-TE5-MK72", effective_date=date(2018, 1, 1),
        ),
        models.Insurance(
            patient=pat3, provider_name="UnitedHealthcare",
            policy_number="UHC-IND-334455", group_number="GRP-3001",
            effective_date=date(2023, 1, 1), expiration_date=date(2025, 12, 31),
        ),
        models.Insurance(
            patient=pat4, provider_name="Medicaid",
            policy_number="CA-MCD-112233", effective_date=date(2000, 1, 1),
        ),
        models.Insurance(
            patient=pat5, provider_name="Cigna",
            policy_number="CIG-EMP-778899", group_number="GRP-4001",
            effective_date=date(2024, 1, 1), expiration_date=date(2025, 12, 31),
        ),
    ]

    # 2025-01-15 09:00 Pacific (17:00 UTC), one visit per day; stored as naive UTC
    base = datetime(2025, 1, 15, 17, 0)
    visit_plan = [
        (doc1, pat1, "Annual physical", "Routine checkup, within normal limits", "BP 118/76, labs ordered"),
        (doc1, pat2, "Chest discomfort", "Anxiety, musculoskeletal", "EKG normal, recommend stress management"),
        (doc2, pat2, "Cardiology follow-up", "Hypertension, controlled", "Continue current regimen"),
        (doc2, pat1, "Palpitations", "Benign PVCs", "Monitor, reduce caffeine"),
        (doc3, pat3, "Child fever", "Viral pharyngitis", "Acetaminophen, fluids, rest"),
        (doc3, pat4, "Immunization", "Well child", "Tdap booster administered"),
        (doc4, pat5, "Skin exam", "Mild contact dermatitis", "Topical steroid prescribed"),
        (doc1, pat3, "Sports physical", "Cleared for athletics", "Form completed"),
    ]
    visits = [
        models.Visit(
            doctor=doctor, patient=patient, visit_date=base + timedelta(days=day),
            reason=reason, diagnosis=diagnosis, notes=notes,
        )
        for day, (doctor, patient, reason, diagnosis, notes) in enumerate(visit_plan)
    ]

    # Related rows are cascaded through the relationships
    db.add_all([org1, org2, *insurances, *visits])

    try:
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Seeding failed: {e}")
        raise

    counts = {
        "organizations": 2,
        "facilities": 3,
        "doctors": 4,
        "patients": 5,
        "insurances": len(insurances),
        "visits": len(visits),
    }
    logger.info(f"Seed completed successfully: {counts}")
    return counts


async def main():
    logger.info("Seeding database...")
    async with AsyncSessionLocal() as session:
        await seed_clinic_data(session)
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
