"""HR Records package.

Data-consistency layer of an employee-records admin tool, organized by feature
modules (counters, auth, uniqueness, employees, employments, salaries) with a thin
Flask JSON controller layer over service/repository layers and a document store.
"""
