from decimal import Decimal

from django.contrib.auth import get_user_model

from bookings.models import Booking
from fleet.models import Car

User = get_user_model()


def make_customer(username="customer", **extra):
	return User.objects.create_user(
		username=username,
		password='pass1234',
		role=User.ROLE_CUSTOMER,
		**extra
	)


def make_driver(username="driver", status=User.STATUS_ACTIVE, **extra):
	return User.objects.create_user(
		username=username,
		password='driver1234',
		role=User.ROLE_DRIVER,
		status=status,
		**extra
	)


def make_admin(username="admin"):
	return User.objects.create_user(
		username=username,
		password='admin1234',
		role=User.ROLE_ADMIN,
	)


def make_car(driver, plate, status=Car.STATUS_AVAILABLE, make="Toyota", model="Corolla"):
	return Car.objects.create(
		driver=driver,
		make=make,
		model=model,
		plate_number=plate,
		status=status,
	)


def make_booking(customer, status="pending", driver=None, car=None, amount="12.50", **extra):
	return Booking.objects.create(
		customer=customer,
		driver=driver,
		car=car,
		pickup=extra.pop("pickup", "Main Street 1"),
		dropoff=extra.pop("dropoff", "Airport"),
		amount=Decimal(amount),
		status=status,
		**extra
	)
