"""Study-hall attendance package.

Organized by feature modules (attendance, database, ...) with a thin Flask
controller layer over service/repository layers. The attendance module owns
check-in/check-out sessions and the study-hour aggregates derived from them.
"""
