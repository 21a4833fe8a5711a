# NetAdmin
# Network operations admin backend for routers, locations and staff

__version__ = '1.0.0'
__author__ = 'NetAdmin Development Team'
