from birthday_api.models.payment import Payment, Currency, PaymentMethod, PaymentStatus, Exchange
