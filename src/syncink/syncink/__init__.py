"""SyncInk attendance package.

Organized by feature modules (settings, users, attendance, retroactive, ...)
with a thin Flask controller layer over service/repository layers.
"""
