"""HR Records — employees, departments and job history over a hosted relational store."""
