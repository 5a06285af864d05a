"""
Demo data for a fresh petclinic database.

Loaded at startup when ``PETCLINIC_SEED_DATA`` is enabled. Seeding is skipped
when the store already holds pet types.
"""

import logging
from datetime import date
from typing import Dict

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Owner, Pet, PetType, Specialty, User, Vet, Visit
from ..security.passwords import hash_password
from ..security.roles import Role

logger = logging.getLogger(__name__)

PET_TYPES = ["cat", "dog", "lizard", "snake", "bird", "hamster"]

SPECIALTIES = ["radiology", "surgery", "dentistry"]

VETS = [
    ("James", "Carter", []),
    ("Helen", "Leary", ["radiology"]),
    ("Linda", "Douglas", ["surgery", "dentistry"]),
    ("Rafael", "Ortega", ["surgery"]),
    ("Henry", "Stevens", ["radiology"]),
    ("Sharon", "Jenkins", []),
]

OWNERS = [
    ("George", "Franklin", "110 W. Liberty St.", "Madison", "6085551023"),
    ("Betty", "Davis", "638 Cardinal Ave.", "Sun Prairie", "6085551749"),
    ("Eduardo", "Rodriquez", "2693 Commerce St.", "McFarland", "6085558763"),
    ("Harold", "Davis", "563 Friendly St.", "Windsor", "6085553198"),
    ("Peter", "McTavish", "2387 S. Fair Way", "Madison", "6085552765"),
    ("Jean", "Coleman", "105 N. Lake St.", "Monona", "6085552654"),
]

# (pet name, birth date, type, owner index)
PETS = [
    ("Leo", date(2010, 9, 7), "cat", 0),
    ("Basil", date(2012, 8, 6), "hamster", 1),
    ("Rosy", date(2011, 4, 17), "dog", 2),
    ("Jewel", date(2010, 3, 7), "dog", 2),
    ("Iggy", date(2010, 11, 30), "lizard", 3),
    ("George", date(2010, 1, 20), "snake", 4),
    ("Samantha", date(2012, 9, 4), "cat", 5),
    ("Max", date(2012, 9, 4), "cat", 5),
]

# (pet name, visit date, description)
VISITS = [
    ("Samantha", date(2013, 1, 1), "rabies shot"),
    ("Max", date(2013, 1, 2), "rabies shot"),
    ("Max", date(2013, 1, 3), "neutered"),
    ("Samantha", date(2013, 1, 4), "spayed"),
]

DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin"


async def seed_demo_data(session: AsyncSession) -> bool:
    """
    Insert the demo clinic data set.

    Args:
        session: Session inside an open transaction

    Returns:
        True if data was inserted, False if the store was already populated
    """
    existing = await session.scalar(select(func.count()).select_from(PetType))
    if existing:
        logger.info("Database already contains data, skipping seed")
        return False

    types: Dict[str, PetType] = {name: PetType(name=name) for name in PET_TYPES}
    specialties: Dict[str, Specialty] = {
        name: Specialty(name=name) for name in SPECIALTIES
    }
    session.add_all(list(types.values()) + list(specialties.values()))

    for first_name, last_name, held in VETS:
        vet = Vet(first_name=first_name, last_name=last_name)
        vet.set_specialties([specialties[name] for name in held])
        session.add(vet)

    owners = [
        Owner(
            first_name=first_name,
            last_name=last_name,
            address=address,
            city=city,
            telephone=telephone,
        )
        for first_name, last_name, address, city, telephone in OWNERS
    ]
    session.add_all(owners)

    pets: Dict[str, Pet] = {}
    for name, birth_date, type_name, owner_index in PETS:
        pet = Pet(name=name, birth_date=birth_date, type=types[type_name])
        owners[owner_index].add_pet(pet)
        pets[name] = pet

    for pet_name, visit_date, description in VISITS:
        pets[pet_name].add_visit(Visit(visit_date=visit_date, description=description))

    admin = User(
        username=DEFAULT_ADMIN_USERNAME,
        password=hash_password(DEFAULT_ADMIN_PASSWORD),
    )
    for role in Role:
        admin.add_role(role.value)
    session.add(admin)

    await session.flush()
    logger.info(
        f"Seeded {len(types)} pet types, {len(specialties)} specialties, "
        f"{len(VETS)} vets, {len(owners)} owners, {len(pets)} pets"
    )
    return True
