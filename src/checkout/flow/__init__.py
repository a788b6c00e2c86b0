from checkout.flow.steps import AddressMode, CheckoutFlow, CheckoutStep, CustomerAccount

__all__ = ["AddressMode", "CheckoutFlow", "CheckoutStep", "CustomerAccount"]
