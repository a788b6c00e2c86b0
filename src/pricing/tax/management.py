"""Tax fee management — commands and handler."""

from protean import handle
from protean.fields import Boolean, Decimal, Identifier, String
from protean.utils.globals import current_domain

from pricing.domain import pricing
from pricing.tax.tax_fee import TaxFee


@pricing.command(part_of="TaxFee")
class CreateTaxFee:
    name = String(required=True, max_length=100)
    rate = Decimal(required=True, min_value=0)
    is_active = Boolean(default=True)


@pricing.command(part_of="TaxFee")
class DeactivateTaxFee:
    tax_fee_id = Identifier(required=True)


@pricing.command_handler(part_of=TaxFee)
class ManageTaxFeesHandler:
    @handle(CreateTaxFee)
    def create_tax_fee(self, command):
        tax_fee = TaxFee(name=command.name, rate=command.rate, is_active=command.is_active)
        current_domain.repository_for(TaxFee).add(tax_fee)
        return str(tax_fee.id)

    @handle(DeactivateTaxFee)
    def deactivate_tax_fee(self, command):
        repo = current_domain.repository_for(TaxFee)
        tax_fee = repo.get(command.tax_fee_id)
        tax_fee.deactivate()
        repo.add(tax_fee)


def active_tax_fees() -> list[TaxFee]:
    return current_domain.repository_for(TaxFee)._dao.query.filter(is_active=True).all().items
