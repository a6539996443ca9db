from typing import Any, Dict

from ..calc_utils import number_or, to_fixed, safe_pow


def amortized_payment(principal, annual_rate, months):
    """Level monthly payment: M = P * i(1+i)^n / ((1+i)^n - 1)."""
    if annual_rate == 0:
        return principal / months
    i = annual_rate / 100 / 12
    growth = safe_pow(1 + i, months)
    if growth == 1:
        return principal / months
    return principal * (i * growth) / (growth - 1)


class SimpleInterest:
    slug = "simple-interest-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: number_or(e.get(k)) for k in ("principal", "rate", "time")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        interest = x["principal"] * (x["rate"] / 100) * x["time"]
        return {"interest": to_fixed(interest), "total": to_fixed(x["principal"] + interest)}


class CompoundInterest:
    """Monthly compounding with a monthly contribution."""
    slug = "compound-interest-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: number_or(e.get(k)) for k in ("principal", "monthlyContribution", "rate", "years")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        p, pmt = x["principal"], x["monthlyContribution"]
        r = x["rate"] / 100 / 12
        n = x["years"] * 12

        if r == 0:
            fv = p + pmt * n
        else:
            growth = safe_pow(1 + r, n)
            fv = p * growth + pmt * (growth - 1) / r
        invested = p + pmt * n
        return {"futureValue": to_fixed(fv), "totalInterest": to_fixed(fv - invested)}


class ROI:
    slug = "roi-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: number_or(e.get(k)) for k in ("invested", "returned")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        profit = x["returned"] - x["invested"]
        roi = profit / x["invested"] * 100 if x["invested"] > 0 else 0
        return {"profit": to_fixed(profit), "roi": to_fixed(roi)}


class Margin:
    slug = "margin-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: number_or(e.get(k)) for k in ("cost", "revenue")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        if x["revenue"] == 0:
            return {"margin": 0, "profit": 0}
        profit = x["revenue"] - x["cost"]
        return {"margin": to_fixed(profit / x["revenue"] * 100), "profit": to_fixed(profit)}


class Loan:
    slug = "loan-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: number_or(e.get(k)) for k in ("principal", "rate", "term")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        principal, years = x["principal"], x["term"]
        if principal <= 0 or years <= 0:
            return {"monthlyPayment": 0, "totalInterest": 0, "totalPayment": 0}

        months = years * 12
        monthly = amortized_payment(principal, x["rate"], months)
        total = monthly * months
        return {
            "monthlyPayment": to_fixed(monthly),
            "totalInterest": to_fixed(total - principal),
            "totalPayment": to_fixed(total),
        }


class Mortgage:
    slug = "mortgage-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: number_or(e.get(k)) for k in ("homePrice", "downPayment", "interestRate", "loanTerm")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        principal = max(0.0, x["homePrice"] - x["downPayment"])
        years = x["loanTerm"]
        if principal == 0 or years <= 0:
            return {"principalLoan": 0, "monthlyPayment": 0, "totalInterest": 0, "totalPayment": 0}

        months = years * 12
        monthly = amortized_payment(principal, x["interestRate"], months)
        total = monthly * months
        return {
            "principalLoan": to_fixed(principal),
            "monthlyPayment": to_fixed(monthly),
            "totalInterest": to_fixed(total - principal),
            "totalPayment": to_fixed(total),
        }


class VAT:
    slug = "vat-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: number_or(e.get(k)) for k in ("netAmount", "taxRate")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        tax = x["netAmount"] * (x["taxRate"] / 100)
        return {"taxAmount": to_fixed(tax), "grossAmount": to_fixed(x["netAmount"] + tax)}


class Tip:
    slug = "tip-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "billAmount": number_or(e.get("billAmount")),
            "tipPercent": number_or(e.get("tipPercent")),
            "peopleCount": max(1.0, number_or(e.get("peopleCount"), 1.0)),
        }

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        tip = x["billAmount"] * (x["tipPercent"] / 100)
        total = x["billAmount"] + tip
        return {
            "tipAmount": to_fixed(tip),
            "totalAmount": to_fixed(total),
            "perPerson": to_fixed(total / x["peopleCount"]),
        }


class Discount:
    slug = "discount-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: number_or(e.get(k)) for k in ("price", "discount")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        savings = x["price"] * (x["discount"] / 100)
        return {"savings": to_fixed(savings), "finalPrice": to_fixed(x["price"] - savings)}


class Salary:
    """Hourly rate scaled over a 52-week year."""
    slug = "salary-calculator"

    def normalize(self, e: Dict[str, Any]) -> Dict[str, Any]:
        return {k: number_or(e.get(k)) for k in ("hourlyRate", "hoursPerWeek")}

    def compute(self, x: Dict[str, Any]) -> Dict[str, Any]:
        weekly = x["hourlyRate"] * x["hoursPerWeek"]
        annual = weekly * 52
        return {"weekly": to_fixed(weekly), "monthly": to_fixed(annual / 12), "annual": to_fixed(annual)}
