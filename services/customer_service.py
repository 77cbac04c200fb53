"""
Customer Service.

Customer profiles in the Customers table, keyed by username. Accounts
registered through the login page have no profile until an admin opens
one; the profile is then created blank from the account.

Exports:
    CustomerService: Customer profile operations
"""

from typing import List, Optional

from util_logger import LoggerFactory, ComponentType
from core.models import Customer, CUSTOMER_PARTITION, utc_now
from exceptions import ResourceNotFoundError
from infrastructure.postgresql import UserRepository

logger = LoggerFactory.create_logger(ComponentType.SERVICE, "CustomerService")


class CustomerService:
    """Business logic for customer profiles."""

    def __init__(self, storage, users: Optional[UserRepository] = None):
        self.storage = storage
        self.users = users or UserRepository()

    def list_customers(self) -> List[Customer]:
        """
        All customer profiles.

        With an empty table, a blank (unsaved) profile is listed for every account.
        """
        customers = self.storage.get_all_entities(Customer)
        if customers:
            return customers
        logger.info("Customers table empty, listing accounts instead")
        return [Customer.blank_for_user(user.username) for user in self.users.list_users()]

    def get_customer(self, customer_id: str) -> Customer:
        customer = self.storage.get_entity(Customer, CUSTOMER_PARTITION, customer_id) if customer_id else None
        if customer is None:
            raise ResourceNotFoundError(f"Customer {customer_id} not found")
        return customer

    def get_or_create_customer(self, customer_id: str) -> Customer:
        """
        Find a profile by row key, then by username; otherwise create a
        blank one for the matching account.

        Raises:
            ResourceNotFoundError: No profile and no account with that name
        """
        if not customer_id:
            raise ResourceNotFoundError("Customer id is required")

        customer = self.storage.get_entity(Customer, CUSTOMER_PARTITION, customer_id)
        if customer is not None:
            return customer

        for candidate in self.storage.get_all_entities(Customer):
            if candidate.row_key == customer_id or candidate.username == customer_id:
                return candidate

        user = self.users.get_by_username(customer_id)
        if user is None:
            raise ResourceNotFoundError(f"Customer {customer_id} not found")

        customer = Customer.blank_for_user(user.username, updated_at=utc_now())
        self.storage.add_entity(customer)
        logger.info(f"👤 Created blank customer profile for {user.username}")
        return customer

    def create_customer(self, username: str, name: str, surname: str, email: str,
                        shipping_address: str) -> Customer:
        fields = dict(
            username=username,
            name=name,
            surname=surname,
            email=email,
            shipping_address=shipping_address,
            updated_at=utc_now(),
        )
        if username:
            fields["row_key"] = username
        customer = Customer(**fields)
        self.storage.add_entity(customer)
        logger.info(f"✅ Customer created: {customer.row_key}")
        return customer

    def update_customer(self, customer_id: str, username: str, name: str, surname: str,
                        email: str, shipping_address: str) -> Customer:
        customer = self.get_customer(customer_id)
        customer.username = username
        customer.name = name
        customer.surname = surname
        customer.email = email
        customer.shipping_address = shipping_address
        customer.updated_at = utc_now()
        self.storage.update_entity(customer)
        logger.info(f"✅ Customer updated: {customer_id}")
        return customer

    def delete_customer(self, customer_id: str) -> None:
        self.storage.delete_entity(Customer, CUSTOMER_PARTITION, customer_id)
        logger.info(f"🗑️ Customer deleted: {customer_id}")
