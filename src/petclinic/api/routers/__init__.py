"""
Routers for the petclinic REST resources.
"""

from . import owners, pet_types, pets, specialties, vets, visits

ROUTERS = [
    pet_types.router,
    specialties.router,
    vets.router,
    owners.router,
    pets.router,
    visits.router,
]

__all__ = ["ROUTERS"]
