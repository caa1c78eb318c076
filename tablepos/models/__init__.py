from tablepos.models.dish import Dish
from tablepos.models.dining_table import DiningTable
from tablepos.models.order import Order
from tablepos.models.order_item import OrderItem
from tablepos.models.system_config import SystemConfig
