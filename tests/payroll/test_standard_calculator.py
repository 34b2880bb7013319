from hr_system.payroll.calculator.standard_calculator import StandardPayrollCalculator
from hr_system.payroll.model import SalaryComponents


def test_standard_calculator_adds_earnings_and_subtracts_deductions():
    components = SalaryComponents(
        base_salary=1000,
        allowances=150,
        bonuses=100,
        deductions=75.5,
        overtime_pay=60,
    )

    calc = StandardPayrollCalculator()
    assert calc.net_salary(components) == 1234.5


def test_standard_calculator_base_only():
    assert StandardPayrollCalculator().net_salary(SalaryComponents(base_salary=800)) == 800
