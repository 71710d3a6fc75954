"""
Payment Repository.
"""

from modules.backend.models.payment import Payment
from modules.backend.repositories.base import UserOwnedRepository


class PaymentRepository(UserOwnedRepository[Payment]):
    model = Payment
