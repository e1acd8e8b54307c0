from flowershop.models.user import User, UserSession, ActiveUser
from flowershop.models.address import Address
from flowershop.models.holiday import Holiday
from flowershop.models.category import Category, Subcategory
from flowershop.models.product import Product, ProductType
from flowershop.models.flower import Flower, BouquetFlower
from flowershop.models.cart import CartItem
from flowershop.models.order_item import OrderItem
from flowershop.models.order import Order
from flowershop.models.review import Review
from flowershop.models.file import File

# add ALL models here
