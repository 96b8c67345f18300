"""
Test Suite for the MySalary Ledger

Test Structure:
- fixtures/: Seeded households, clocks and synthetic transaction streams
- unit/: Unit tests mirroring src/ package structure
- integration/: Service scenarios and CLI workflows

Test Categories:
- Core utilities (money, currency, dates, models, config)
- Ledger store, writer, confirmation and reconciliation
- Budget progress
- Statements and net worth

Test Data:
All owners, accounts and amounts are synthetic.
"""
