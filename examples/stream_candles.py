"""Print one-minute candles for an instrument until interrupted.

TINVEST_TOKEN=t.xxx python examples/stream_candles.py [instrument_uid]
"""
import asyncio
import sys

from t_invest_sdk import TInvestSdk, quotation_to_decimal, timestamp_to_datetime
from t_invest_sdk.core.logging_config import configure_logging, get_logger
from t_invest_sdk.protos import marketdata_pb2


logger = get_logger(__name__)

# SBER
DEFAULT_INSTRUMENT = "e6123145-9665-43e0-8413-cd61b8aa9b13"


async def main(instrument_id: str) -> None:
    configure_logging()

    async with await TInvestSdk.production() as sdk:
        call = sdk.market_data_stream().MarketDataStream()
        await call.write(
            marketdata_pb2.MarketDataRequest(
                subscribe_candles_request=marketdata_pb2.SubscribeCandlesRequest(
                    subscription_action=marketdata_pb2.SUBSCRIPTION_ACTION_SUBSCRIBE,
                    instruments=[
                        marketdata_pb2.CandleInstrument(
                            instrument_id=instrument_id,
                            interval=marketdata_pb2.SUBSCRIPTION_INTERVAL_ONE_MINUTE,
                        )
                    ],
                )
            )
        )

        try:
            async for response in call:
                kind = response.WhichOneof("payload")
                if kind == "subscribe_candles_response":
                    for sub in response.subscribe_candles_response.candles_subscriptions:
                        logger.info(
                            "candles_subscription",
                            instrument_uid=sub.instrument_uid,
                            status=marketdata_pb2.SubscriptionStatus.Name(sub.subscription_status),
                        )
                elif kind == "candle":
                    c = response.candle
                    logger.info(
                        "candle",
                        instrument_uid=c.instrument_uid,
                        time=timestamp_to_datetime(c.time).isoformat(),
                        open=str(quotation_to_decimal(c.open)),
                        high=str(quotation_to_decimal(c.high)),
                        low=str(quotation_to_decimal(c.low)),
                        close=str(quotation_to_decimal(c.close)),
                        volume=c.volume,
                    )
        except asyncio.CancelledError:
            call.cancel()
            raise


if __name__ == "__main__":
    try:
        asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_INSTRUMENT))
    except KeyboardInterrupt:
        logger.info("stream_stopped")
