"""Open a sandbox account, top it up and print the portfolio.

TINVEST_TOKEN=t.xxx python examples/sandbox_quickstart.py
"""
import asyncio
from decimal import Decimal

from t_invest_sdk import TInvestSdk, decimal_to_money_value, money_value_to_decimal
from t_invest_sdk.core.logging_config import configure_logging, get_logger
from t_invest_sdk.protos import operations_pb2, sandbox_pb2


logger = get_logger(__name__)


async def main() -> None:
    configure_logging()

    async with await TInvestSdk.sandbox() as sdk:
        sandbox = sdk.sandbox_service()

        opened = await sandbox.OpenSandboxAccount(sandbox_pb2.OpenSandboxAccountRequest(name="quickstart"))
        account_id = opened.account_id
        logger.info("sandbox_account_opened", account_id=account_id)

        try:
            pay_in = await sandbox.SandboxPayIn(
                sandbox_pb2.SandboxPayInRequest(
                    account_id=account_id,
                    amount=decimal_to_money_value(Decimal("100000"), "rub"),
                )
            )
            logger.info("sandbox_pay_in", balance=str(money_value_to_decimal(pay_in.balance)))

            portfolio = await sandbox.GetSandboxPortfolio(
                operations_pb2.PortfolioRequest(account_id=account_id)
            )
            logger.info(
                "sandbox_portfolio",
                total=str(money_value_to_decimal(portfolio.total_amount_portfolio)),
                currency=portfolio.total_amount_portfolio.currency,
                positions=len(portfolio.positions),
            )
        finally:
            await sandbox.CloseSandboxAccount(sandbox_pb2.CloseSandboxAccountRequest(account_id=account_id))
            logger.info("sandbox_account_closed", account_id=account_id)


if __name__ == "__main__":
    asyncio.run(main())
