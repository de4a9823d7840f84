"""各策略模板的可编辑参数代码（ListingText 的规范版本）。

这些文本只用于展示与参数同步，不会被执行。完整性校验以这里的结构为准：
用户只能改数字，不能改结构。
"""

from __future__ import annotations

LISTING_HEADER = "strategy.py                         Python 3.9"

DUAL_MA = f"""{LISTING_HEADER}

# A-Share Dual Moving Average
# 双均线策略: 短期均线上穿长期均线买入，下穿卖出

class DualThrustStrategy(Strategy):
    params = (
        ('period_fast', 10),  # 短期均线
        ('period_slow', 20), # 长期均线
        ('stop_loss', 5),    # 止损 %
        ('take_profit', 15), # 止盈 %
    )

    def __init__(self):
        self.sma_fast = bt.indicators.SMA(
            self.data.close,
            period=self.params.period_fast
        )
        self.sma_slow = bt.indicators.SMA(
            self.data.close,
            period=self.params.period_slow
        )

    def next(self):
        if not self.position:
            if self.sma_fast > self.sma_slow:
                self.buy()
        elif self.sma_fast < self.sma_slow:
            self.close()

        # 止盈止损逻辑 (模拟)
        if self.position:
             pnl_pct = (self.data.close[0] - self.position.price) / self.position.price * 100
             if pnl_pct < -self.params.stop_loss or pnl_pct > self.params.take_profit:
                 self.close()
"""

SINGLE_MA = f"""{LISTING_HEADER}

# Single Moving Average Strategy
# 单均线策略: 价格在均线上方买入，下方卖出

class SingleMAStrategy(Strategy):
    params = (
        ('period', 10),      # 均线周期
        ('stop_loss', 5),    # 止损 %
        ('take_profit', 15), # 止盈 %
    )

    def __init__(self):
        self.sma = bt.indicators.SMA(self.data.close, period=self.params.period)

    def next(self):
        if not self.position and self.data.close[0] > self.sma[0]:
            self.buy()
        elif self.position and self.data.close[0] < self.sma[0]:
            self.close()

        if self.position:
             pnl_pct = (self.data.close[0] - self.position.price) / self.position.price * 100
             if pnl_pct < -self.params.stop_loss or pnl_pct > self.params.take_profit:
                 self.close()
"""

SMALL_CAP = f"""{LISTING_HEADER}

# Small Market Cap Strategy
# 小市值策略: 轮动持有市值最小的股票 (每月调仓)

class SmallCapStrategy(Strategy):
    params = (
        ('hold_count', 3),
        ('volume_ratio', 1.5), # 量比阈值
        ('pe_ratio', 30),      # 市盈率阈值
    )

    def __init__(self):
        self.last_month = -1

    def next(self):
        # 每月调仓逻辑：检测月份变化
        dt = self.data.datetime.date(0)
        if self.last_month == dt.month:
            return

        self.last_month = dt.month

        # 筛选符合量比和PE条件的股票
        candidates = [
            d for d in self.datas
            if d.volume_ratio > self.params.volume_ratio
            and d.pe < self.params.pe_ratio
        ]

        # 按市值排序
        sorted_stocks = sorted(candidates, key=lambda d: d.market_cap)
        target_stocks = sorted_stocks[:self.params.hold_count]

        # 卖出不在目标池的持仓
        for stock in self.position:
            if stock not in target_stocks:
                self.close(stock)

        # 买入目标池股票
        for stock in target_stocks:
            if not self.getposition(stock):
                self.buy(stock)
"""

GRID = f"""{LISTING_HEADER}

# Grid Trading Strategy
# 网格策略: 价格下跌买入，价格上涨卖出

class GridStrategy(Strategy):
    params = (
        ('grid_step', 2.0),  # 网格间距 %
        ('grid_size', 1000), # 每格交易数量
        ('stop_loss', 5),    # 止损 %
        ('take_profit', 15), # 止盈 %
    )

    def __init__(self):
        self.last_price = self.data.close[0]

    def next(self):
        price = self.data.close[0]
        step_val = self.params.grid_step / 100.0

        # 下跌超过步长，买入
        if price <= self.last_price * (1 - step_val):
            self.buy(size=self.params.grid_size)
            self.last_price = price
        # 上涨超过步长，卖出
        elif price >= self.last_price * (1 + step_val):
            self.sell(size=self.params.grid_size)
            self.last_price = price
"""

T0 = f"""{LISTING_HEADER}

# Intraday T+0 Strategy (日内T0)
# 逻辑: 价格偏离昨收一定幅度反向开仓，获利或止损平仓

class IntradayT0Strategy(Strategy):
    params = (
        ('threshold', 0.5),   # 开仓偏离阈值 % (默认 0.5%)
        ('take_profit', 1.5), # 止盈 % (默认 1.5%)
        ('stop_loss', 1.0),   # 止损 % (默认 1.0%)
    )

    def next(self):
        prev_close = self.data.close[-1] # 昨日收盘价
        price = self.data.close[0]       # 当前价格

        # 1. 开仓逻辑
        if not self.position:
            # 做多T0: 价格 < 昨收 * (1 - 阈值) -> 低吸
            if price < prev_close * (1 - self.params.threshold / 100):
                self.buy()
            # 做空T0: 价格 > 昨收 * (1 + 阈值) -> 高抛
            elif price > prev_close * (1 + self.params.threshold / 100):
                self.sell()

        # 2. 平仓逻辑 (盈亏比 1.5 : 1)
        elif self.position:
            # 计算浮动盈亏比例
            if self.position.size > 0: # 持有多单
                 pnl_pct = (price - self.position.price) / self.position.price * 100
            else: # 持有空单
                 pnl_pct = (self.position.price - price) / self.position.price * 100

            # 止盈或止损
            if pnl_pct >= self.params.take_profit or pnl_pct <= -self.params.stop_loss:
                self.close()
"""

LIMIT_UP = f"""{LISTING_HEADER}

# Limit Up Strategy (Da Ban)
# 打板策略: 涨幅超标且量比、涨速达标时扫板买入

class LimitUpStrategy(Strategy):
    params = (
        ('threshold', 9.0),       # 涨幅触发阈值 %
        ('volume_ratio', 1.2),    # 量比阈值
        ('speed_threshold', 3.0), # 1分钟涨速阈值 %
    )

    def next(self):
        prev_close = self.data.close[-1]
        price = self.data.close[0]

        # 计算当日涨幅
        pct_change = (price - prev_close) / prev_close * 100

        # 模拟数据获取：量比和1分钟涨速
        # 实际交易中需分钟线数据计算
        current_volume_ratio = self.data.volume_ratio[0]
        current_speed = self.data.speed_1m[0]

        # 触发买入:
        # 1. 涨幅 > 阈值 (如 9%)
        # 2. 量比 > 阈值 (如 1.2)
        # 3. 1分钟涨速 > 阈值 (如 3%)
        if not self.position:
             if (pct_change > self.params.threshold and
                 current_volume_ratio > self.params.volume_ratio and
                 current_speed > self.params.speed_threshold):
                 self.buy()

        # 简单的次日卖出逻辑
        if self.position:
             pass
"""
