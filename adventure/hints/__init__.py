"""Timed, escalating hint disclosure.

Kept free of FastAPI concerns; the countdown runs on whatever scheduler the caller supplies
(the asyncio loop in the service, a manual clock in tests).
"""
